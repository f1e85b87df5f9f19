from typing import Any, Dict, List, Optional

from supabase_client import supabase

TABLE_NAME = "orders"


def fetch_student_orders(student_id: str) -> List[Dict[str, Any]]:
    response = (
        supabase.table(TABLE_NAME)
        .select("id,order_number,status,order_type,items")
        .eq("student_id", student_id)
        .execute()
    )
    return response.data or []


def fetch_order(student_id: str, order_id: str) -> Optional[Dict[str, Any]]:
    response = (
        supabase.table(TABLE_NAME)
        .select("*")
        .eq("id", order_id)
        .eq("student_id", student_id)
        .limit(1)
        .execute()
    )
    items = response.data or []
    return items[0] if items else None


def find_order_by_number(order_number: str) -> Optional[Dict[str, Any]]:
    response = (
        supabase.table(TABLE_NAME)
        .select("id,order_number")
        .eq("order_number", order_number)
        .limit(1)
        .execute()
    )
    items = response.data or []
    return items[0] if items else None


def insert_order(record: Dict[str, Any]) -> Dict[str, Any]:
    response = supabase.table(TABLE_NAME).insert(record).execute()
    if not response.data:
        raise RuntimeError(f"Failed to store order {record.get('order_number')}")
    return response.data[0]
