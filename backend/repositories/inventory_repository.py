from typing import Any, Dict, List

from supabase_client import supabase

TABLE_NAME = "items"


def fetch_available_sizes(product_name: str, education_level: str) -> List[Dict[str, Any]]:
    response = (
        supabase.table(TABLE_NAME)
        .select("size,stock,status")
        .eq("name", product_name)
        .eq("education_level", education_level)
        .eq("is_archived", False)
        .execute()
    )
    return response.data or []
