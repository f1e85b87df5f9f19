from typing import Any, Dict, Optional

from supabase_client import supabase

TABLE_NAME = "students"


def fetch_student_profile(student_id: str) -> Optional[Dict[str, Any]]:
    response = (
        supabase.table(TABLE_NAME)
        .select(
            "user_id,name,email,education_level,student_type,"
            "max_items_per_order,item_max_quantities"
        )
        .eq("user_id", student_id)
        .limit(1)
        .execute()
    )
    items = response.data or []
    return items[0] if items else None
