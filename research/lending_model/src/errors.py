"""Custom errors for the lending pair model"""

class ProtocolError(Exception):
    """Base error class for protocol errors"""
    pass

class ArithmeticOverflowError(ProtocolError):
    """Error for arithmetic overflow/underflow"""
    pass

class TimestampRegressionError(ProtocolError):
    """Error for a current time earlier than the stored update time"""
    pass

class AccrualOrderingError(ProtocolError):
    """Error for a live accumulator below a position snapshot"""
    pass

class InvalidSettingsError(ProtocolError):
    """Error for out of range rate or fee settings"""
    pass
