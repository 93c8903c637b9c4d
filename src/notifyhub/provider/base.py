"""ChannelProvider -- uniform send interface over delivery channels

The dispatch coordinator only sees this interface. Concrete providers are
picked at construction time from configuration (see factory.py).
"""

from abc import ABC, abstractmethod

from notifyhub.core.models import Channel, DeliveryAttempt, Message, Recipient


class ChannelProvider(ABC):
    """One channel's sender"""

    #: channel served by this provider
    channel: Channel
    #: provider name recorded on attempts
    name: str = ""

    @abstractmethod
    async def send(self, message: Message, recipient: Recipient) -> DeliveryAttempt:
        """Deliver one message to one recipient

        Provider errors are reported as a failed DeliveryAttempt rather than
        raised. Only unexpected bugs escape.
        """
        ...

    def _sent(
        self,
        recipient: Recipient,
        provider_message_id: str | None = None,
        simulated: bool = False,
        provider: str | None = None,
    ) -> DeliveryAttempt:
        return DeliveryAttempt(
            recipient_id=recipient.id,
            channel=self.channel,
            status="sent",
            provider=provider or self.name,
            provider_message_id=provider_message_id,
            simulated=simulated,
        )

    def _failed(
        self,
        recipient: Recipient,
        error: str,
        provider: str | None = None,
    ) -> DeliveryAttempt:
        return DeliveryAttempt(
            recipient_id=recipient.id,
            channel=self.channel,
            status="failed",
            error=error,
            provider=provider or self.name,
        )
