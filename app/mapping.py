"""Translate TMDB movie records into Webflow collection fields."""

from __future__ import annotations

from typing import Sequence

from .config import Settings
from .models import MovieFields, MovieRecord
from .utils import parse_release_year


class MovieMapper:
    """Builds Webflow field sets using the configured artwork and video URLs."""

    def __init__(self, settings: Settings):
        self._poster_base_url = settings.poster_base_url
        self._backdrop_base_url = settings.backdrop_base_url
        self._trailer_url_prefix = settings.trailer_url_prefix

    def poster_url(self, path: str) -> str:
        return self._poster_base_url + path

    def backdrop_url(self, path: str) -> str:
        return self._backdrop_base_url + path

    def trailer_url(self, key: str) -> str:
        return self._trailer_url_prefix + key

    def build_fields(
        self,
        movie: MovieRecord,
        *,
        trailer_key: str,
        genre_references: Sequence[str],
    ) -> MovieFields:
        """Return the Webflow fields for ``movie``.

        Callers are expected to have checked that both artwork paths and the
        trailer key are present.
        """

        return MovieFields(
            name=movie.title,
            movie_id=movie.id,
            genres=list(genre_references),
            backdrop_url=self.backdrop_url(movie.backdrop_path or ""),
            poster_url=self.poster_url(movie.poster_path or ""),
            release_date=movie.release_date,
            release_year=parse_release_year(movie.release_date),
            overview=movie.overview,
            vote_average=movie.vote_average,
            vote_count=movie.vote_count,
            popularity=movie.popularity,
            trailer=self.trailer_url(trailer_key),
            archived=False,
            draft=False,
        )
