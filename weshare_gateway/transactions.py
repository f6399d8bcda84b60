"""
WeShare chaincode actions.

Each action checks the wallet, invokes one chaincode function through the
ledger integration and turns the outcome into the JSON body returned to
HTTP callers. Failures never propagate: callers only see the success flag.
"""
import json
import logging
from typing import Any, List, Optional

from .ledger.base import LedgerIntegration
from .models import ChaincodeArg, TransactionMode, TransactionResult, to_chaincode_args

logger = logging.getLogger(__name__)


def decode_payload(raw: Optional[bytes]) -> Any:
    """Decode a chaincode payload: JSON when possible, text otherwise."""
    if not raw:
        return None
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


class TransactionService:
    """Runs WeShare transactions against a ledger integration."""

    def __init__(self, ledger: LedgerIntegration, required_identity: str):
        self.ledger = ledger
        self.required_identity = required_identity

    async def _run(
        self, mode: TransactionMode, function: str, values: Optional[List[ChaincodeArg]]
    ) -> TransactionResult:
        verb, done = ("submit", "submitted") if mode == TransactionMode.SUBMIT else ("evaluate", "evaluated")
        try:
            # Check to see if the user has been enrolled
            if not await self.ledger.identity_exists(self.required_identity):
                logger.warning(
                    f'An identity for the user "{self.required_identity}" does not exist in the wallet'
                )
                logger.warning("Run the registerUser application before retrying")
                return TransactionResult(
                    success=False,
                    function=function,
                    mode=mode,
                    error=f"identity {self.required_identity} not enrolled",
                )

            args = to_chaincode_args(values)
            if mode == TransactionMode.SUBMIT:
                raw = await self.ledger.submit_transaction(function, *args)
            else:
                raw = await self.ledger.evaluate_transaction(function, *args)

            payload = decode_payload(raw)
            logger.info(f"{function} transaction has been {done}, args: {args}")
            return TransactionResult(success=True, function=function, mode=mode, payload=payload)

        except Exception as e:
            logger.error(f"Failed to {verb} transaction: {e}", exc_info=True)
            return TransactionResult(success=False, function=function, mode=mode, error=str(e))

    async def query(self, user_id: Optional[ChaincodeArg]) -> dict:
        """Evaluate `query` for a user and return the stored user record."""
        result = await self._run(TransactionMode.EVALUATE, "query", [user_id])
        if result.success and isinstance(result.payload, dict):
            return result.payload
        return result.to_response()

    async def init_user(self, user_id: Optional[ChaincodeArg]) -> dict:
        """Submit `initUser`, creating the user with a zero balance."""
        result = await self._run(TransactionMode.SUBMIT, "initUser", [user_id])
        return result.to_response()

    async def complete_share(self, user_arr: Optional[List[ChaincodeArg]]) -> dict:
        """Submit `completeShare`: reward the sharer and every listener."""
        result = await self._run(TransactionMode.SUBMIT, "completeShare", user_arr)
        return result.to_response()

    async def shopping(self, shopping_arr: Optional[List[ChaincodeArg]]) -> dict:
        """Submit `shopping`: move an amount from a user to the reward pool."""
        result = await self._run(TransactionMode.SUBMIT, "shopping", shopping_arr)
        return result.to_response()
