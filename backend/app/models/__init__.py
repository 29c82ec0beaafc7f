from app.models.trip import TripDocument

__all__ = ["TripDocument"]
