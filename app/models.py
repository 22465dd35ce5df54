"""Pydantic models describing TMDB payloads and Webflow items."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MovieRecord(BaseModel):
    """A single movie as returned by the TMDB discover endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    genre_ids: list[int | str] = Field(default_factory=list)

    def has_artwork(self) -> bool:
        """Return ``True`` when both poster and backdrop paths are present."""

        return bool(self.poster_path) and bool(self.backdrop_path)


class DiscoverPage(BaseModel):
    """One page of the discover listing."""

    model_config = ConfigDict(extra="ignore")

    page: int = 1
    results: list[MovieRecord] = Field(default_factory=list)
    total_pages: int | None = None
    total_results: int | None = None


class Video(BaseModel):
    """Video metadata embedded in a movie detail response."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    key: str | None = None
    site: str | None = None
    name: str | None = None

    @property
    def is_trailer(self) -> bool:
        return self.type == "Trailer"


class VideoCollection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[Video] = Field(default_factory=list)


class MovieDetail(BaseModel):
    """Movie detail payload requested with ``append_to_response=videos``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str | None = None
    videos: VideoCollection = Field(default_factory=VideoCollection)

    def first_trailer(self) -> Video | None:
        """Return the first trailer-typed video, if any."""

        return next((video for video in self.videos.results if video.is_trailer), None)


class Genre(BaseModel):
    """A TMDB movie genre."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str


class MovieFields(BaseModel):
    """Field set submitted to the Webflow movies collection."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    movie_id: int = Field(alias="movie-id")
    genres: list[str] = Field(default_factory=list)
    backdrop_url: str = Field(alias="movie-backdrop-poster")
    poster_url: str = Field(alias="movie-poster")
    release_date: str | None = Field(default=None, alias="release-date")
    release_year: int | None = Field(default=None, alias="release-year")
    overview: str | None = None
    vote_average: float | None = Field(default=None, alias="vote-average")
    vote_count: int | None = Field(default=None, alias="vote-count")
    popularity: float | None = None
    trailer: str
    archived: bool = Field(default=False, alias="_archived")
    draft: bool = Field(default=False, alias="_draft")

    def to_webflow(self) -> dict[str, object]:
        """Return the field map keyed by Webflow field slugs."""

        return self.model_dump(by_alias=True)


class GenreFields(BaseModel):
    """Field set submitted to the Webflow genres collection."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    archived: bool = Field(default=False, alias="_archived")
    draft: bool = Field(default=True, alias="_draft")

    def to_webflow(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class CreatedItem(BaseModel):
    """The parts of a Webflow create-item response the sync reads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    name: str | None = None

    def display_name(self) -> str:
        return (self.name or "").strip() or self.id or "Untitled"
