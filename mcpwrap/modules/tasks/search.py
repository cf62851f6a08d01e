"""
Task search optimization.

Workspace task searches can return very large payloads. Requests are forced
into a lightweight mode and responses are reduced to the fields automation
clients actually use.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

from mcpwrap.config.provider import SearchLimits

logger = logging.getLogger(__name__)

MAX_TASK_NAME_LENGTH = 100
MAX_LIST_NAME_LENGTH = 50
MAX_ASSIGNEES = 3
MAX_TAGS = 5

FORCED_SEARCH_PARAMS = {
    "detail_level": "summary",
    "subtasks": False,
    "include_closed": False,
    "include_archived_lists": False,
    "page": 0,
}


def optimize_search_params(
    body: Dict[str, Any], limits: SearchLimits, now_ms: Optional[int] = None
) -> Dict[str, Any]:
    """
    Build lightweight search arguments from a client request body.

    Args:
        body: Arguments supplied by the client
        limits: Search limits
        now_ms: Current epoch time in milliseconds (defaults to now)

    Returns:
        New arguments dict; ``body`` is not modified
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    params = {**body, **FORCED_SEARCH_PARAMS}
    params["date_updated_gt"] = body.get("date_updated_gt") or now_ms - limits.recent_window_ms

    list_ids = params.get("list_ids")
    if isinstance(list_ids, list) and len(list_ids) > limits.max_list_ids:
        params["list_ids"] = list_ids[: limits.max_list_ids]
        logger.warning(f"Limited list_ids to {limits.max_list_ids} for performance")

    return params


def _unwrap(value: Any, key: str) -> Any:
    """Return value[key] when value is a dict carrying a truthy key, else value."""
    if isinstance(value, dict) and value.get(key):
        return value[key]
    return value


def _truncate(value: Any, length: int) -> Any:
    return value[:length] if isinstance(value, str) else value


def slim_task(task: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a task to its summary fields."""
    task_list = task.get("list") if isinstance(task.get("list"), dict) else {}
    assignees = task.get("assignees") if isinstance(task.get("assignees"), list) else []
    tags = task.get("tags") if isinstance(task.get("tags"), list) else []

    return {
        "id": task.get("id"),
        "name": _truncate(task.get("name"), MAX_TASK_NAME_LENGTH),
        "status": _unwrap(task.get("status"), "status"),
        "priority": _unwrap(task.get("priority"), "priority"),
        "url": task.get("url"),
        "list": {
            "id": task_list.get("id"),
            "name": _truncate(task_list.get("name"), MAX_LIST_NAME_LENGTH),
        },
        "due_date": task.get("due_date"),
        "assignees": [
            {"id": a.get("id"), "username": a.get("username")}
            for a in assignees[:MAX_ASSIGNEES]
            if isinstance(a, dict)
        ],
        "tags": [_unwrap(t, "name") for t in tags[:MAX_TAGS]],
    }


def _content_items(result: Any) -> Optional[List[Any]]:
    """Locate the tool result content list in a JSON-RPC response or bare result."""
    if not isinstance(result, dict):
        return None
    payload = result.get("result", result)
    if not isinstance(payload, dict):
        return None
    content = payload.get("content")
    return content if isinstance(content, list) and content else None


def filter_search_result(result: Any, limits: SearchLimits) -> Any:
    """
    Trim a task search result in place.

    Filtering is best effort: any failure is logged and the result is
    returned unfiltered.

    Args:
        result: Bridge result (JSON-RPC response, bare tool result, or text)
        limits: Search limits

    Returns:
        The same result object, with its task list reduced when one was found
    """
    try:
        return _filter_search_result(result, limits)
    except Exception as e:
        logger.warning(f"Could not filter search response, returning it unfiltered: {e}")
        return result


def _filter_search_result(result: Any, limits: SearchLimits) -> Any:
    content = _content_items(result)
    if content is None or not isinstance(content[0], dict):
        return result

    text = content[0].get("text")
    if not isinstance(text, str):
        return result

    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning(f"Could not parse search response for filtering: {e}")
        return result

    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        return result

    original_count = len(data["tasks"])
    tasks = data["tasks"][: limits.max_tasks]
    data["tasks"] = [slim_task(t) for t in tasks if isinstance(t, dict)]
    content[0]["text"] = json.dumps(data)

    logger.info(f"Filtered search response: {original_count} -> {len(data['tasks'])} tasks")
    return result
