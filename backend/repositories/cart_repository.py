from supabase_client import supabase

TABLE_NAME = "carts"


def clear_cart(student_id: str) -> int:
    response = supabase.table(TABLE_NAME).delete().eq("user_id", student_id).execute()
    return len(response.data or [])
