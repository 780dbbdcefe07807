from abc import ABC, abstractmethod

from fastapi import APIRouter


class Resolver(ABC):
    @abstractmethod
    def mount(self, router: APIRouter):
        raise NotImplementedError()
