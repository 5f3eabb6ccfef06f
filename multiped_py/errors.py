class LocomotionError(Exception):
    """
    Base class for every error raised by the locomotion engine.
    """


class DegenerateInputError(LocomotionError, ValueError):
    """
    Raised when a geometric operation is undefined, e.g. normalising a zero-length vector.
    """


class InvalidLinkError(LocomotionError, ValueError):
    pass


class InvalidJointError(LocomotionError, ValueError):
    pass


class ChainStructureError(LocomotionError, ValueError):
    """
    Raised when chain parts do not alternate Joint, Link, Joint, Link... or when an
    incomplete chain is used where a complete one is required.
    """


class InvalidPatternError(LocomotionError, ValueError):
    pass


class UnknownPatternError(LocomotionError, KeyError):
    def __init__(self, name):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown gait pattern: {self.name!r}"


class UnsuitablePatternError(LocomotionError, ValueError):
    pass


class ConfigurationError(LocomotionError, ValueError):
    pass
