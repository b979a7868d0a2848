import json
from typing import Any, Union


def loads(data: Union[bytes, str]) -> Any:
    """
    Deserialize a relay payload.

    Args:
        data: UTF-8 JSON as received on the subject

    Returns:
        Python object from the JSON payload

    Raises:
        ValueError: If data is not valid UTF-8 JSON
    """
    if isinstance(data, bytes):
        data = data.decode()
    return json.loads(data)
