"""Domain errors raised by the selection core and mapped to HTTP in messmeal.main."""


class MessMealError(Exception):
    status_code = 400


class UnknownItemError(MessMealError):
    status_code = 404

    def __init__(self, item_id: int):
        super().__init__(f"Item {item_id} is not in the catalog")
        self.item_id = item_id


class UnknownMealTimeError(MessMealError):
    status_code = 422

    def __init__(self, meal_time: str):
        super().__init__(f"Unknown meal time: {meal_time}")
        self.meal_time = meal_time


class ItemNotSelectedError(MessMealError):
    status_code = 409

    def __init__(self, item_id: int):
        super().__init__(f"Item {item_id} is not selected")
        self.item_id = item_id


class MealTimeLockedError(MessMealError):
    status_code = 409

    def __init__(self, item_id: int):
        super().__init__(f"Meal times of item {item_id} are not editable")
        self.item_id = item_id


class SubmissionInProgressError(MessMealError):
    status_code = 409

    def __init__(self):
        super().__init__("A save is already in progress")


class SubmissionError(MessMealError):
    """Remote save failed. The message is shown to the user as-is."""

    status_code = 502


class CatalogUnavailableError(MessMealError):
    status_code = 503
