import logging

import requests

TELEGRAM_API = "https://api.telegram.org"


class Notifier:
    def send(self, text: str) -> None:
        raise NotImplementedError


class LogNotifier(Notifier):
    def send(self, text: str) -> None:
        logging.getLogger(__name__).info("notify_dry_run text=%r", text)


class TelegramNotifier(Notifier):
    def __init__(self, session: requests.Session, bot_token: str, chat_id: str, timeout_seconds: float) -> None:
        self._session = session
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._timeout = timeout_seconds

    def send(self, text: str) -> None:
        url = f"{TELEGRAM_API}/bot{self._bot_token}/sendMessage"
        resp = self._session.post(
            url,
            json={"chat_id": self._chat_id, "text": text},
            timeout=self._timeout,
        )
        resp.raise_for_status()
        logging.getLogger(__name__).info(
            "telegram_sent chat_id=%s status=%s chars=%s",
            self._chat_id,
            resp.status_code,
            len(text),
        )


def build_notifier(config, session: requests.Session, logger: logging.Logger) -> Notifier:
    token = getattr(config, "telegram_bot_token", "")
    chat_id = getattr(config, "telegram_chat_id", "")
    if not token or not chat_id:
        logger.warning("telegram_not_configured using LogNotifier")
        return LogNotifier()
    logger.info("telegram_enabled chat_id=%s", chat_id)
    return TelegramNotifier(session, token, chat_id, config.request_timeout_seconds)
