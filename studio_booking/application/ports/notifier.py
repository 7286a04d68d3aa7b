from abc import ABC, abstractmethod


class NotifierPort(ABC):
    @abstractmethod
    def notify(self, to: str, subject: str, body: str) -> None:
        raise NotImplementedError
