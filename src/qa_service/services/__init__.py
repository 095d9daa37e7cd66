from .moderation import ModerationClient, Moderator

__all__ = ["ModerationClient", "Moderator"]
