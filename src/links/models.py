from sqlalchemy import Column, MetaData, String, Table, Text

metadata = MetaData()

links = Table(
    "links",
    metadata,
    Column("id", String, primary_key=True),
    Column("url", Text, nullable=False),
)
