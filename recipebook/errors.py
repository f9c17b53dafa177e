class RecipeBookError(Exception):
    pass


class InvalidParameter(RecipeBookError):
    def __init__(self, name: str, value: object):
        super().__init__(f"Invalid value for {name}: {value!r}")
        self.name = name
        self.value = value


class EntityNotFound(RecipeBookError):
    def __init__(self, kind: str, entity_id: object):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class RecipeNotFound(EntityNotFound):
    def __init__(self, recipe_id: int):
        super().__init__("Recipe", recipe_id)


class CookbookNotFound(EntityNotFound):
    def __init__(self, cookbook_id: int):
        super().__init__("Cookbook", cookbook_id)


class UnknownEntityKind(RecipeBookError, ValueError):
    def __init__(self, kind: str):
        super().__init__(f"Unknown entity kind: {kind}")
        self.kind = kind


class StoreUnavailable(RecipeBookError):
    def __init__(self, reason: str = "Entity store unavailable", retryable: bool = True):
        super().__init__(reason)
        self.reason = reason
        self.retryable = retryable
