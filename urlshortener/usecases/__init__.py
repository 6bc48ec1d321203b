from urlshortener.usecases.shorten_url import ShortenURLUseCase
from urlshortener.usecases.resolve_url import ResolveURLUseCase
from urlshortener.usecases.list_urls import ListURLsUseCase


__all__ = [
    'ShortenURLUseCase',
    'ResolveURLUseCase',
    'ListURLsUseCase',
]
