class ConntesterException(Exception):
    """Base Exception Class"""
    pass

class ConfigurationError(ConntesterException):
    """Configuration Error (missing URI, bad config file, etc.)"""
    pass

class MetricsError(ConfigurationError):
    """Metrics sink could not be constructed"""
    pass

class ConnectionError(ConntesterException):
    """Connection Failure"""
    pass

class ProbeTimeoutError(ConnectionError):
    """Probe deadline exceeded"""
    pass

class QueryError(ConntesterException):
    """Diagnostic query failed on an otherwise healthy connection"""
    pass
