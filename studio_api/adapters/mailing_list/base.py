from abc import ABC, abstractmethod


class AbstractMailingListClient(ABC):
    """Interface for mailing-list providers."""

    @abstractmethod
    async def subscribe(self, email: str, *, source: str) -> None:
        """Register email as a subscriber.

        Args:
            email: Address to subscribe, as entered by the user.
            source: Free-form label stored with the subscriber.

        Raises:
            httpx.HTTPError: On transport failures or non-2xx responses.
        """
        ...
