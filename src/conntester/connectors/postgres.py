import math
from typing import Any, Dict
from sqlalchemy.engine import URL
from .base import SQLAlchemyConnector, remaining

LIBPQ_DRIVERS = ("psycopg2", "psycopg")

def _query_value(url: URL, key: str):
    value = url.query.get(key)
    if isinstance(value, tuple):
        return " ".join(value)
    return value

class PostgresConnector(SQLAlchemyConnector):
    """
    PostgreSQL specific implementation.
    Hands the remaining probe budget to the driver so a hung connect or query
    is cut off instead of running past the deadline:
      - libpq drivers: connect_timeout plus a server-side statement_timeout,
        appended to any `options` already in the URI
      - pg8000: its socket `timeout`
      - anything else: nothing, the connector's own deadline checks apply
    """
    def _connect_args(self, url: URL, deadline: float) -> Dict[str, Any]:
        budget = max(remaining(deadline), 0.001)
        driver = url.get_driver_name()

        if driver in LIBPQ_DRIVERS:
            # libpq only takes whole seconds
            connect_timeout = max(1, math.ceil(budget))
            user_timeout = _query_value(url, "connect_timeout")
            if user_timeout and user_timeout.isdigit() and int(user_timeout) > 0:
                connect_timeout = min(connect_timeout, int(user_timeout))

            statement_timeout = f"-c statement_timeout={max(1, int(budget * 1000))}"
            user_options = _query_value(url, "options")
            return {
                "connect_timeout": connect_timeout,
                # later -c settings win, so the probe budget overrides a user statement_timeout
                "options": f"{user_options} {statement_timeout}" if user_options else statement_timeout,
            }
        if driver == "pg8000":
            return {"timeout": budget}
        return {}
