"""Transaction check that only registered applications submit data."""

from dataclasses import dataclass

_SUBMIT_DATA = ("DataAvailability", "submit_data")


class InvalidTransaction(Exception):
    """The transaction is not valid and must be rejected."""


class InvalidAppId(InvalidTransaction):
    """The application id is not registered."""


class ForbiddenAppId(InvalidTransaction):
    """Only data submission may use a non-zero application id."""


@dataclass(frozen=True)
class CheckAppId:
    """Validates the application id carried by a transaction."""

    app_id: int

    IDENTIFIER = "CheckAppId"

    def __repr__(self):
        return f"CheckAppId: {self.app_id}"

    def validate(self, call, control):
        """Check ``call``, a ``(pallet, function)`` pair, against the registry ``control``.

        Data submission may use any registered id; every other call must use id 0.
        Returns True when the transaction may proceed.
        """
        if tuple(call) == _SUBMIT_DATA:
            if self.app_id >= control.peek_next_application_id():
                raise InvalidAppId(f"application id {self.app_id} is not registered")
        elif self.app_id != 0:
            raise ForbiddenAppId(f"application id {self.app_id} is not allowed for {call}")
        return True