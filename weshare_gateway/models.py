"""
Data models for gateway requests and transaction results.
"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


# Chaincode arguments are strings; JSON numbers are accepted and converted.
ChaincodeArg = Union[str, int, float]


class TransactionMode(str, Enum):
    """How a transaction reaches the ledger."""
    SUBMIT = "submit"  # endorsed, ordered and committed
    EVALUATE = "evaluate"  # executed on a peer only


class InitUserRequest(BaseModel):
    """Body of POST /initUser."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[ChaincodeArg] = Field(default=None, alias="userId")


class CompleteShareRequest(BaseModel):
    """Body of POST /completeShare: sharer first, listeners after."""
    model_config = ConfigDict(populate_by_name=True)

    user_arr: Optional[List[ChaincodeArg]] = Field(default=None, alias="userArr")


class ShoppingRequest(BaseModel):
    """Body of POST /shopping: [userId, amount]."""
    model_config = ConfigDict(populate_by_name=True)

    shopping_arr: Optional[List[ChaincodeArg]] = Field(default=None, alias="shoppingArr")


class TransactionResult(BaseModel):
    """Outcome of a single chaincode invocation."""
    success: bool
    function: str
    mode: TransactionMode
    payload: Optional[Any] = None
    error: Optional[str] = None

    def to_response(self) -> dict:
        """Render the JSON body returned to HTTP callers."""
        if not self.success:
            return {"success": "false"}
        response = {"success": "true"}
        if self.payload is not None:
            response["result"] = self.payload
        return response


def to_chaincode_args(values: Optional[List[ChaincodeArg]]) -> List[str]:
    """Convert request values to chaincode string arguments."""
    if not values:
        raise ValueError("No transaction arguments supplied")
    args = []
    for value in values:
        if value is None:
            raise ValueError("Transaction arguments must not be null")
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        args.append(str(value))
    return args


def form_to_dict(items: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """
    Collapse url-encoded form items into a request dict.

    `userArr[]=a&userArr[]=b`, `userArr[0]=a&userArr[1]=b` and repeated
    plain keys become lists; a single plain key stays a scalar.
    """
    data: Dict[str, Any] = {}
    array_keys = set()
    for key, value in items:
        if key.endswith("]") and "[" in key:
            key = key[:key.index("[")]
            array_keys.add(key)
        data.setdefault(key, []).append(value)
    return {
        key: values if key in array_keys or len(values) > 1 else values[0]
        for key, values in data.items()
    }
