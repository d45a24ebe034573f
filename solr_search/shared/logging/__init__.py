from .structured_logger import LogLevel, StructuredLogger, configure_logging

__all__ = ['LogLevel', 'StructuredLogger', 'configure_logging']
