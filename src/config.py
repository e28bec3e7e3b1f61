import os

from dotenv import load_dotenv

load_dotenv()

DB_USER = os.getenv("DB_USER", "postgres")
DB_PASS = os.getenv("DB_PASS", "postgres")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "linkalias")
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
# Set to 1 to create the links table on startup
DB_CREATE_TABLES = os.getenv("DB_CREATE_TABLES", "0") == "1"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
KEEP_ALIVE = int(os.getenv("KEEP_ALIVE", "60"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
