"""Фасады ресурсов Diffsome API."""

from diffsome.resources.auth import AuthResource
from diffsome.resources.blog import BlogResource
from diffsome.resources.boards import BoardsResource
from diffsome.resources.comments import CommentsResource
from diffsome.resources.entities import EntitiesResource, EntityAccessor
from diffsome.resources.forms import FormsResource
from diffsome.resources.media import MediaResource
from diffsome.resources.reservation import ReservationResource
from diffsome.resources.shop import ShopResource

__all__ = [
    "AuthResource",
    "BlogResource",
    "BoardsResource",
    "CommentsResource",
    "EntitiesResource",
    "EntityAccessor",
    "FormsResource",
    "MediaResource",
    "ReservationResource",
    "ShopResource",
]
