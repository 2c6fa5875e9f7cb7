"""Pydantic schemas for showtime data."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MovieInfo(_CamelModel):
    id: str
    title: str
    genre: list[str] | None = None
    duration: int | None = None
    rating: float | None = None
    poster_url: str | None = None
    language: str | None = None


class TheaterInfo(_CamelModel):
    id: str
    name: str
    location: str | None = None


class ShowtimeResponse(_CamelModel):
    """Showtime as returned by GET /showtimes/{id}."""

    id: str
    movie_id: str
    theater_id: str
    screen: str | None = None
    show_date_time: datetime
    ticket_price: float | None = None
    total_seats: int | None = None
    available_seats: int | None = None
    status: str | None = None
    movie: MovieInfo | None = None
    theater: TheaterInfo | None = None


class ShowtimeSummary(BaseModel):
    """Display-only movie and theater fields carried into a booking draft."""

    id: str
    show_date_time: datetime
    movie_id: str
    movie_title: str
    movie_poster_url: str | None = None
    theater_id: str
    theater_name: str
    theater_location: str | None = None
    screen: str | None = None

    @classmethod
    def from_response(cls, showtime: ShowtimeResponse) -> "ShowtimeSummary":
        movie = showtime.movie
        theater = showtime.theater
        return cls(
            id=showtime.id,
            show_date_time=showtime.show_date_time,
            movie_id=showtime.movie_id,
            movie_title=(movie.title if movie and movie.title else "Movie"),
            movie_poster_url=movie.poster_url if movie else None,
            theater_id=showtime.theater_id,
            theater_name=theater.name if theater else "",
            theater_location=theater.location if theater else None,
            screen=showtime.screen,
        )
