"""Static mapping between TMDB movie genres and Webflow genre items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class GenreMapping:
    """Associates a TMDB genre id with the Webflow item that represents it."""

    tmdb_id: int
    name: str
    item_id: str


MOVIE_GENRES: tuple[GenreMapping, ...] = (
    GenreMapping(tmdb_id=28, name="Action", item_id="6350c466177fc03ab366dbde"),
    GenreMapping(tmdb_id=12, name="Adventure", item_id="6350c466fc61527feb98ed8d"),
    GenreMapping(tmdb_id=16, name="Animation", item_id="6350c4669fddb42553273d22"),
    GenreMapping(tmdb_id=35, name="Comedy", item_id="6350c46611c67034a8dd3950"),
    GenreMapping(tmdb_id=80, name="Crime", item_id="6350c46672526eaf9a608e0f"),
    GenreMapping(tmdb_id=99, name="Documentary", item_id="6350c46646bb1dba9bac4506"),
    GenreMapping(tmdb_id=18, name="Drama", item_id="6350c4663aebc3d9ab68b239"),
    GenreMapping(tmdb_id=10751, name="Family", item_id="6350c466b8b704cc5e00bba4"),
    GenreMapping(tmdb_id=14, name="Fantasy", item_id="6350c467716c1349cd979ea5"),
    GenreMapping(tmdb_id=36, name="History", item_id="6350c466e48b907aae3dc343"),
    GenreMapping(tmdb_id=27, name="Horror", item_id="6350c4661f96af44035b5d8b"),
    GenreMapping(tmdb_id=10402, name="Music", item_id="6350c466cc865494f30b2562"),
    GenreMapping(tmdb_id=9648, name="Mystery", item_id="6350c4662be0acf3c39fcfe1"),
    GenreMapping(tmdb_id=10749, name="Romance", item_id="6350c466e3858126836a733c"),
    GenreMapping(
        tmdb_id=878, name="Science Fiction", item_id="6350c466227c9381e733fc5f"
    ),
    GenreMapping(tmdb_id=10770, name="TV Movie", item_id="6350c466c1cf132f292a862e"),
    GenreMapping(tmdb_id=53, name="Thriller", item_id="6350c466968264447a173718"),
    GenreMapping(tmdb_id=10752, name="War", item_id="6350c466227c9320d433fc60"),
    GenreMapping(tmdb_id=37, name="Western", item_id="6350c46672526e68ea608e10"),
)


class GenreLookup:
    """Resolves TMDB genre ids to Webflow reference ids."""

    def __init__(self, mappings: Iterable[GenreMapping] = MOVIE_GENRES):
        self._by_id: dict[int, GenreMapping] = {}
        for mapping in mappings:
            self._by_id.setdefault(int(mapping.tmdb_id), mapping)

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, genre_id: object) -> GenreMapping | None:
        """Return the mapping for ``genre_id`` or ``None`` when unknown."""

        key = self._coerce_id(genre_id)
        if key is None:
            return None
        return self._by_id.get(key)

    def resolve(self, genre_ids: Iterable[object]) -> list[str]:
        """Return Webflow item ids for the known genres, keeping source order."""

        references: list[str] = []
        for genre_id in genre_ids:
            mapping = self.get(genre_id)
            if mapping is not None:
                references.append(mapping.item_id)
        return references

    @staticmethod
    def _coerce_id(value: object) -> int | None:
        # bool is an int subclass but never a genre id
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return int(text)
        return None
