class InvalidContentError(Exception):
    """Module content (question bank, options, transfer items) failed validation."""
    def __init__(self, message="Unable to validate module content."):
        super().__init__(message)


class UnknownParameterError(KeyError):
    """Parameter name not declared by the active simulation model."""
    def __init__(self, message="Parameter not declared by model."):
        super().__init__(message)


class UnknownModelError(KeyError):
    """Simulation model name not found in the registry."""
    def __init__(self, message="Simulation model not registered."):
        super().__init__(message)


class UnknownPresetError(KeyError):
    """Module preset name not found in the registry."""
    def __init__(self, message="Module preset not registered."):
        super().__init__(message)
