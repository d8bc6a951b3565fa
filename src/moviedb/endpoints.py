"""Declarative table of API operations.

Each operation is an ``Endpoint`` class attribute on ``EndpointsMixin``.
Looked up on a client instance it becomes an async method that feeds the
verb, template and caller params into ``MovieDb.request``:

    await client.movie_info(550)
    await client.season_info({"id": 1399, "season_number": 1})
    await client.search_movie("Alien")
    await client.configuration()
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from moviedb.models import HttpMethod, Params

GET = HttpMethod.GET
POST = HttpMethod.POST
DELETE = HttpMethod.DELETE

EPISODE = "tv/:id/season/:season_number/episode/:episode_number"


@dataclass(frozen=True)
class Endpoint:
    """One API operation.

    Attributes:
        method: HTTP verb.
        template: Path template relative to the API root.
        scalar_key: Parameter a bare scalar argument is bound to, for
            endpoints without a placeholder to infer it from (``query`` for
            searches).
        takes_params: False for operations that accept no parameters.
    """

    method: HttpMethod
    template: str
    scalar_key: Optional[str] = None
    takes_params: bool = True

    def __set_name__(self, owner: type, name: str) -> None:
        object.__setattr__(self, "name", name)

    def prepare(self, params: Params) -> Params:
        """Bind a scalar argument to ``scalar_key`` when one is declared."""
        if self.scalar_key and params is not None and not isinstance(params, Mapping):
            return {self.scalar_key: params}
        return params

    def __get__(self, instance: Any, owner: type) -> Any:  # noqa: ANN401
        if instance is None:
            return self
        endpoint = self

        if self.takes_params:

            async def call(
                params: Params = None,
                request_options: Optional[Mapping[str, Any]] = None,
            ) -> Any:  # noqa: ANN401
                return await instance.request(
                    endpoint.method,
                    endpoint.template,
                    endpoint.prepare(params),
                    request_options,
                )

        else:

            async def call(  # type: ignore[misc]
                request_options: Optional[Mapping[str, Any]] = None,
            ) -> Any:  # noqa: ANN401
                return await instance.request(
                    endpoint.method, endpoint.template, None, request_options
                )

        call.__name__ = getattr(self, "name", "call")
        call.__doc__ = f"{self.method.value} {self.template}"
        return call


def no_params(template: str) -> Endpoint:
    """GET endpoint that takes no parameters."""
    return Endpoint(GET, template, takes_params=False)


class EndpointsMixin:
    """API operations, grouped the way the API documents them."""

    request: Callable[..., Awaitable[Any]]

    # Configuration
    configuration = no_params("configuration")
    countries = no_params("configuration/countries")
    jobs = no_params("configuration/jobs")
    languages = no_params("configuration/languages")
    primary_translations = no_params("configuration/primary_translations")
    timezones = no_params("configuration/timezones")

    find = Endpoint(GET, "find/:id")

    # Search
    search_company = Endpoint(GET, "search/company", scalar_key="query")
    search_collection = Endpoint(GET, "search/collection", scalar_key="query")
    search_keyword = Endpoint(GET, "search/keyword", scalar_key="query")
    search_movie = Endpoint(GET, "search/movie", scalar_key="query")
    search_multi = Endpoint(GET, "search/multi", scalar_key="query")
    search_person = Endpoint(GET, "search/person", scalar_key="query")
    search_tv = Endpoint(GET, "search/tv", scalar_key="query")
    search_list = Endpoint(GET, "search/list")

    # Collections
    collection_info = Endpoint(GET, "collection/:id")
    collection_images = Endpoint(GET, "collection/:id/images")
    collection_translations = Endpoint(GET, "collection/:id/translations")

    # Discover and trending
    discover_movie = Endpoint(GET, "discover/movie")
    discover_tv = Endpoint(GET, "discover/tv")
    trending = Endpoint(GET, "trending/:media_type/:time_window")

    # Movies
    movie_info = Endpoint(GET, "movie/:id")
    movie_account_states = Endpoint(GET, "movie/:id/account_states")
    movie_alternative_titles = Endpoint(GET, "movie/:id/alternative_titles")
    movie_changes = Endpoint(GET, "movie/:id/changes")
    movie_credits = Endpoint(GET, "movie/:id/credits")
    movie_external_ids = Endpoint(GET, "movie/:id/external_ids")
    movie_images = Endpoint(GET, "movie/:id/images")
    movie_keywords = Endpoint(GET, "movie/:id/keywords")
    movie_release_dates = Endpoint(GET, "movie/:id/release_dates")
    movie_videos = Endpoint(GET, "movie/:id/videos")
    movie_watch_providers = Endpoint(GET, "movie/:id/watch/providers")
    movie_watch_provider_list = Endpoint(GET, "watch/providers/movie")
    movie_translations = Endpoint(GET, "movie/:id/translations")
    movie_recommendations = Endpoint(GET, "movie/:id/recommendations")
    movie_similar = Endpoint(GET, "movie/:id/similar")
    movie_reviews = Endpoint(GET, "movie/:id/reviews")
    movie_lists = Endpoint(GET, "movie/:id/lists")
    movie_rating_update = Endpoint(POST, "movie/:id/rating")
    movie_rating_delete = Endpoint(DELETE, "movie/:id/rating")
    movie_latest = Endpoint(GET, "movie/latest", scalar_key="language")
    movie_now_playing = Endpoint(GET, "movie/now_playing")
    movie_popular = Endpoint(GET, "movie/popular")
    movie_top_rated = Endpoint(GET, "movie/top_rated")
    upcoming_movies = Endpoint(GET, "movie/upcoming")

    # TV shows
    tv_info = Endpoint(GET, "tv/:id")
    tv_account_states = Endpoint(GET, "tv/:id/account_states")
    tv_alternative_titles = Endpoint(GET, "tv/:id/alternative_titles")
    tv_changes = Endpoint(GET, "tv/:id/changes")
    tv_content_ratings = Endpoint(GET, "tv/:id/content_ratings")
    tv_credits = Endpoint(GET, "tv/:id/credits")
    tv_aggregate_credits = Endpoint(GET, "tv/:id/aggregate_credits")
    episode_groups = Endpoint(GET, "tv/:id/episode_groups")
    tv_external_ids = Endpoint(GET, "tv/:id/external_ids")
    tv_images = Endpoint(GET, "tv/:id/images")
    tv_keywords = Endpoint(GET, "tv/:id/keywords")
    tv_recommendations = Endpoint(GET, "tv/:id/recommendations")
    tv_reviews = Endpoint(GET, "tv/:id/reviews")
    tv_screened_theatrically = Endpoint(GET, "tv/:id/screened_theatrically")
    tv_similar = Endpoint(GET, "tv/:id/similar")
    tv_translations = Endpoint(GET, "tv/:id/translations")
    tv_videos = Endpoint(GET, "tv/:id/videos")
    tv_watch_providers = Endpoint(GET, "tv/:id/watch/providers")
    tv_watch_provider_list = Endpoint(GET, "watch/providers/tv")
    tv_rating_update = Endpoint(POST, "tv/:id/rating")
    tv_rating_delete = Endpoint(DELETE, "tv/:id/rating")
    tv_latest = Endpoint(GET, "tv/latest")
    tv_airing_today = Endpoint(GET, "tv/airing_today")
    tv_on_the_air = Endpoint(GET, "tv/on_the_air")
    tv_popular = Endpoint(GET, "tv/popular")
    tv_top_rated = Endpoint(GET, "tv/top_rated")

    # Seasons
    season_info = Endpoint(GET, "tv/:id/season/:season_number")
    season_changes = Endpoint(GET, "tv/season/:id/changes")
    season_account_states = Endpoint(GET, "tv/:id/season/:season_number/account_states")
    season_credits = Endpoint(GET, "tv/:id/season/:season_number/credits")
    season_aggregate_credits = Endpoint(
        GET, "tv/:id/season/:season_number/aggregate_credits"
    )
    season_external_ids = Endpoint(GET, "tv/:id/season/:season_number/external_ids")
    season_images = Endpoint(GET, "tv/:id/season/:season_number/images")
    season_videos = Endpoint(GET, "tv/:id/season/:season_number/videos")

    # Episodes
    episode_info = Endpoint(GET, EPISODE)
    episode_changes = Endpoint(GET, "tv/episode/:id/changes")
    episode_account_states = Endpoint(GET, f"{EPISODE}/account_states")
    episode_credits = Endpoint(GET, f"{EPISODE}/credits")
    episode_external_ids = Endpoint(GET, f"{EPISODE}/external_ids")
    episode_images = Endpoint(GET, f"{EPISODE}/images")
    episode_translations = Endpoint(GET, f"{EPISODE}/translations")
    episode_rating_update = Endpoint(POST, f"{EPISODE}/rating")
    episode_rating_delete = Endpoint(DELETE, f"{EPISODE}/rating")
    episode_videos = Endpoint(GET, f"{EPISODE}/videos")

    # People
    person_info = Endpoint(GET, "person/:id")
    person_changes = Endpoint(GET, "person/:id/changes")
    person_movie_credits = Endpoint(GET, "person/:id/movie_credits")
    person_tv_credits = Endpoint(GET, "person/:id/tv_credits")
    person_combined_credits = Endpoint(GET, "person/:id/combined_credits")
    person_external_ids = Endpoint(GET, "person/:id/external_ids")
    person_images = Endpoint(GET, "person/:id/images")
    person_tagged_images = Endpoint(GET, "person/:id/tagged_images")
    person_translations = Endpoint(GET, "person/:id/translations")
    person_latest = Endpoint(GET, "person/latest")
    person_popular = Endpoint(GET, "person/popular")

    credit_info = Endpoint(GET, "credit/:id")

    # Lists
    list_info = Endpoint(GET, "list/:id")
    list_status = Endpoint(GET, "list/:id/item_status")
    create_list = Endpoint(POST, "list")
    create_list_item = Endpoint(POST, "list/:id/add_item")
    remove_list_item = Endpoint(POST, "list/:id/remove_item")
    clear_list = Endpoint(POST, "list/:id/clear")
    delete_list = Endpoint(DELETE, "list/:id")

    # Genres, keywords, companies
    genre_movie_list = Endpoint(GET, "genre/movie/list")
    genre_tv_list = Endpoint(GET, "genre/tv/list")
    keyword_info = Endpoint(GET, "keyword/:id")
    keyword_movies = Endpoint(GET, "keyword/:id/movies")
    company_info = Endpoint(GET, "company/:id")
    company_alternative_names = Endpoint(GET, "company/:id/alternative_names")
    company_images = Endpoint(GET, "company/:id/images")

    # Account; ":id" defaults to the session's account
    account_info = no_params("account")
    account_lists = Endpoint(GET, "account/:id/lists")
    account_favorite_movies = Endpoint(GET, "account/:id/favorite/movies")
    account_favorite_tv = Endpoint(GET, "account/:id/favorite/tv")
    account_favorite_update = Endpoint(POST, "account/:id/favorite")
    account_rated_movies = Endpoint(GET, "account/:id/rated/movies")
    account_rated_tv = Endpoint(GET, "account/:id/rated/tv")
    account_rated_tv_episodes = Endpoint(GET, "account/:id/rated/tv/episodes")
    account_movie_watchlist = Endpoint(GET, "account/:id/watchlist/movies")
    account_tv_watchlist = Endpoint(GET, "account/:id/watchlist/tv")
    account_watchlist_update = Endpoint(POST, "account/:id/watchlist")

    # Changes and certifications
    changed_movies = Endpoint(GET, "movie/changes")
    changed_tvs = Endpoint(GET, "tv/changes")
    changed_people = Endpoint(GET, "person/changes")
    movie_certifications = no_params("certification/movie/list")
    tv_certifications = no_params("certification/tv/list")

    # Networks, reviews, episode groups
    network_info = Endpoint(GET, "network/:id")
    network_alternative_names = Endpoint(GET, "network/:id/alternative_names")
    network_images = Endpoint(GET, "network/:id/images")
    review = Endpoint(GET, "review/:id")
    episode_group = Endpoint(GET, "tv/episode_group/:id")


def endpoint_table() -> dict[str, Endpoint]:
    """All declared endpoints by method name."""
    return {
        name: value
        for name, value in vars(EndpointsMixin).items()
        if isinstance(value, Endpoint)
    }
