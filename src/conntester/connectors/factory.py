from .base import SQLAlchemyConnector
from .postgres import PostgresConnector

_POSTGRES_ALIAS_SCHEME = "postgres://"

def normalize_uri(uri: str) -> str:
    """
    libpq accepts the bare `postgres://` scheme, SQLAlchemy does not.
    """
    uri = uri.strip()
    if uri.startswith(_POSTGRES_ALIAS_SCHEME):
        return "postgresql://" + uri[len(_POSTGRES_ALIAS_SCHEME):]
    return uri

def get_connector(uri: str, alias: str = "unknown") -> SQLAlchemyConnector:
    """
    Factory function to create the appropriate connector instance
    from a connection URI.
    """
    connection_string = normalize_uri(uri)

    # postgresql:// and postgresql+driver://
    if connection_string.startswith("postgresql"):
        return PostgresConnector(connection_string, alias)
    return SQLAlchemyConnector(connection_string, alias)
