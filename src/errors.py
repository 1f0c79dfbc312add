"""Exceptions raised by the layout engine."""


class LayoutError(Exception):
    """Base class for every error the layout engine raises."""


class RootNotFoundError(LayoutError, ValueError):
    def __init__(self, person_id: str):
        self.person_id = person_id
        super().__init__(f"Root person with ID '{person_id}' not found")


class StrategyNotFoundError(LayoutError, LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Layout strategy '{name}' not found")


class InvalidOptionError(LayoutError, ValueError):
    pass
