from .service import ExternalContentService, detect_trigger, genres_for_mood, DEFAULT_GENRES, MOOD_GENRES

__all__ = ["ExternalContentService", "detect_trigger", "genres_for_mood", "DEFAULT_GENRES", "MOOD_GENRES"]
