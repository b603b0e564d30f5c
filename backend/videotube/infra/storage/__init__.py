from .supabase_media_storage import SupabaseMediaStorage

__all__ = ["SupabaseMediaStorage"]
