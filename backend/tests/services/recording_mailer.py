"""Recording mailer — in-memory transport for service and route tests."""

from tasklist.infrastructure.mailer import Mailer, OutboundEmail


class RecordingMailer(Mailer):
    """Mailer that keeps every delivered email in memory."""

    def __init__(self, fail: bool = False):
        super().__init__("no-reply@test.local")
        self.sent: list[OutboundEmail] = []
        self.fail = fail

    async def _deliver(self, email: OutboundEmail) -> None:
        if self.fail:
            raise ConnectionError("SMTP relay unreachable")
        self.sent.append(email)
