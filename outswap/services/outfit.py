"""
Outfit service: listings CRUD, search and nearby discovery.

Search combines structured filters (availability, category, size, daily
price range, geo radius) with exactly one ordering: relevance ranking when
a free-text query is present and the caller asked for the default sort,
otherwise a field sort. Pagination is applied last.

Reference: https://docs.sqlalchemy.org/en/21/orm/queryguide/
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from outswap.api.v1.schemas.outfit import OutfitCreate, OutfitSearchParams, OutfitUpdate
from outswap.core.clock import utcnow
from outswap.core.config import Settings, settings
from outswap.core.exceptions import (
    InvalidParameterException,
    NotFoundException,
    ValidationException,
)
from outswap.models.outfit import Outfit
from outswap.services.geo import bounding_box, haversine_meters
from outswap.services.relevance import matches_query, normalize_query, rank_by_relevance
from outswap.services.validation import validate_outfit_input

logger = logging.getLogger(__name__)

# Fields a client may never overwrite through an update
PROTECTED_FIELDS = {"id", "owner_id", "created_at", "rating", "total_ratings"}


@dataclass
class SearchPage:
    """One page of search results plus pagination metadata."""

    items: List[Outfit]
    total: int
    page: int
    limit: int
    total_pages: int
    distances: Dict[str, float] = field(default_factory=dict)


class OutfitService:
    """Service for managing and searching outfit listings"""

    def __init__(self, config: Settings = settings):
        self.config = config

    async def get_outfit(self, db: AsyncSession, outfit_id: str) -> Optional[Outfit]:
        """
        Get an outfit by ID.

        Args:
            db: Database session
            outfit_id: Outfit ID

        Returns:
            Outfit if found, None otherwise
        """
        result = await db.execute(select(Outfit).where(Outfit.id == outfit_id))
        return result.scalar_one_or_none()

    async def get_outfits_by_owner(self, db: AsyncSession, owner_id: str) -> List[Outfit]:
        """Get all outfits listed by a user, newest first."""
        result = await db.execute(
            select(Outfit)
            .where(Outfit.owner_id == owner_id)
            .order_by(Outfit.created_at.desc(), Outfit.id)
        )
        return list(result.scalars().all())

    async def create_outfit(self, db: AsyncSession, outfit_data: OutfitCreate) -> Outfit:
        """
        Create a new outfit listing.

        Args:
            db: Database session
            outfit_data: Listing fields

        Returns:
            Created outfit with rating 0 and no ratings

        Raises:
            ValidationException: If any business rule fails
        """
        validation = validate_outfit_input(outfit_data.model_dump())
        if not validation.is_valid:
            logger.warning(
                f"Rejected outfit for owner {outfit_data.owner_id}: "
                f"{len(validation.errors)} validation error(s)"
            )
            raise ValidationException(validation.errors)

        values = self._column_values(outfit_data.model_dump(mode="json"))
        outfit = Outfit(
            owner_id=outfit_data.owner_id,
            rating=0.0,
            total_ratings=0,
            available=outfit_data.available,
            **values,
        )
        db.add(outfit)
        await db.flush()
        logger.info(f"Created outfit '{outfit.title}' (ID: {outfit.id}) for owner {outfit.owner_id}")
        return outfit

    async def update_outfit(
        self, db: AsyncSession, outfit_id: str, outfit_data: OutfitUpdate
    ) -> Outfit:
        """
        Update an outfit (partial update).

        The merged result of the current listing and the supplied fields must
        still pass outfit validation.

        Raises:
            NotFoundException: If the outfit does not exist
            ValidationException: If the merged listing is invalid
        """
        outfit = await self.get_outfit(db, outfit_id)
        if not outfit:
            raise NotFoundException("Outfit", outfit_id)

        changes = {
            key: value
            for key, value in outfit_data.model_dump(exclude_unset=True).items()
            if key not in PROTECTED_FIELDS
        }
        if changes.get("available", True) is None:
            changes.pop("available")
        if not changes:
            return outfit

        merged = {**self._current_values(outfit), **changes}
        validation = validate_outfit_input(merged)
        if not validation.is_valid:
            logger.warning(
                f"Rejected update of outfit {outfit_id}: {len(validation.errors)} validation error(s)"
            )
            raise ValidationException(validation.errors)

        json_changes = outfit_data.model_dump(mode="json", include=set(changes))
        for column, value in self._column_values(json_changes).items():
            setattr(outfit, column, value)
        if "available" in changes:
            outfit.available = changes["available"]

        outfit.updated_at = utcnow()
        await db.flush()
        logger.info(f"Updated outfit {outfit_id} fields: {sorted(changes)}")
        return outfit

    async def delete_outfit(self, db: AsyncSession, outfit_id: str) -> None:
        """
        Delete an outfit. Existing rentals keep their reference.

        Raises:
            NotFoundException: If the outfit does not exist
        """
        outfit = await self.get_outfit(db, outfit_id)
        if not outfit:
            raise NotFoundException("Outfit", outfit_id)
        await db.delete(outfit)
        await db.flush()
        logger.info(f"Deleted outfit {outfit_id}")

    async def search_outfits(
        self, db: AsyncSession, params: OutfitSearchParams
    ) -> SearchPage:
        """
        Search available outfits.

        Args:
            db: Database session
            params: Filters, sort option and paging

        Returns:
            SearchPage with the requested page and totals over all matches

        Raises:
            InvalidParameterException: If a filter or paging value is malformed
        """
        page, limit = self._resolve_paging(params)
        self._check_filters(params)

        term = normalize_query(params.query)
        sort_by = params.sort_by or "newest"
        center = self._search_center(params)
        radius = params.radius if params.radius is not None else self.config.NEARBY_DEFAULT_RADIUS_METERS
        use_relevance = bool(term) and sort_by == "newest"

        logger.info(
            f"Outfit search query={term!r} category={params.category} size={params.size} "
            f"price=[{params.min_price}, {params.max_price}] center={center} "
            f"sort={sort_by} relevance={use_relevance} page={page} limit={limit}"
        )

        stmt = self._filtered_query(params)
        if center is not None:
            stmt = self._within_box(stmt, center, radius)
        skip = (page - 1) * limit

        if not term and center is None:
            # Everything can be answered by the database
            count_result = await db.execute(select(func.count()).select_from(stmt.subquery()))
            total = count_result.scalar_one()
            result = await db.execute(
                stmt.order_by(*self._sort_columns(sort_by)).offset(skip).limit(limit)
            )
            items = list(result.scalars().all())
            distances: Dict[str, float] = {}
        else:
            result = await db.execute(stmt.order_by(*self._sort_columns("newest")))
            candidates = list(result.scalars().all())

            if term:
                candidates = [outfit for outfit in candidates if matches_query(outfit, term)]

            distances = {}
            if center is not None:
                candidates, distances = self._within_radius(candidates, center, radius)

            if use_relevance:
                candidates = rank_by_relevance(candidates, term)
            elif sort_by == "proximity" and center is not None:
                candidates.sort(key=lambda outfit: distances[outfit.id])
            else:
                candidates = self._sort_in_memory(candidates, sort_by)

            total = len(candidates)
            items = candidates[skip:skip + limit]

        total_pages = math.ceil(total / limit) if total else 0
        logger.info(f"Outfit search matched {total} outfit(s), returning {len(items)} on page {page}/{total_pages}")
        return SearchPage(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            distances={outfit.id: distances[outfit.id] for outfit in items if outfit.id in distances},
        )

    async def get_nearby_outfits(
        self,
        db: AsyncSession,
        latitude: float,
        longitude: float,
        radius: Optional[float] = None,
    ) -> List[Tuple[Outfit, float]]:
        """
        Get available outfits within a radius of a point, nearest first.

        Args:
            db: Database session
            latitude: Center latitude
            longitude: Center longitude
            radius: Radius in meters (defaults to 5 miles)

        Returns:
            Up to NEARBY_MAX_RESULTS (outfit, distance_meters) pairs

        Raises:
            InvalidParameterException: If coordinates or radius are out of range
        """
        if not -90 <= latitude <= 90:
            raise InvalidParameterException("latitude must be between -90 and 90", "latitude")
        if not -180 <= longitude <= 180:
            raise InvalidParameterException("longitude must be between -180 and 180", "longitude")
        if radius is None:
            radius = self.config.NEARBY_DEFAULT_RADIUS_METERS
        if radius <= 0:
            raise InvalidParameterException("radius must be greater than 0", "radius")

        center = (latitude, longitude)
        stmt = self._within_box(select(Outfit).where(Outfit.available.is_(True)), center, radius)
        result = await db.execute(stmt.order_by(*self._sort_columns("newest")))
        outfits, distances = self._within_radius(list(result.scalars().all()), center, radius)
        outfits.sort(key=lambda outfit: distances[outfit.id])
        nearby = outfits[: self.config.NEARBY_MAX_RESULTS]
        logger.info(f"Found {len(nearby)} outfit(s) within {radius:.0f}m of {center}")
        return [(outfit, distances[outfit.id]) for outfit in nearby]

    def _resolve_paging(self, params: OutfitSearchParams) -> Tuple[int, int]:
        page = params.page
        limit = params.limit if params.limit is not None else self.config.SEARCH_DEFAULT_LIMIT
        if page < 1:
            raise InvalidParameterException("page must be at least 1", "page")
        if limit < 1 or limit > self.config.SEARCH_MAX_LIMIT:
            raise InvalidParameterException(
                f"limit must be between 1 and {self.config.SEARCH_MAX_LIMIT}", "limit"
            )
        return page, limit

    def _check_filters(self, params: OutfitSearchParams) -> None:
        for name, value in (("minPrice", params.min_price), ("maxPrice", params.max_price)):
            if value is not None and (not math.isfinite(value) or value < 0):
                raise InvalidParameterException(f"{name} must be a non-negative number", name)
        if (
            params.min_price is not None
            and params.max_price is not None
            and params.min_price > params.max_price
        ):
            raise InvalidParameterException("minPrice must not exceed maxPrice", "minPrice")
        if params.radius is not None and (not math.isfinite(params.radius) or params.radius <= 0):
            raise InvalidParameterException("radius must be greater than 0", "radius")

    @staticmethod
    def _search_center(params: OutfitSearchParams) -> Optional[Tuple[float, float]]:
        # Geo filtering is a no-op unless the caller sends both coordinates
        location = params.location
        if location is None or location.latitude is None or location.longitude is None:
            return None
        return location.latitude, location.longitude

    @staticmethod
    def _filtered_query(params: OutfitSearchParams) -> Select:
        stmt = select(Outfit).where(Outfit.available.is_(True))
        if params.category:
            stmt = stmt.where(Outfit.category == params.category.value)
        if params.size:
            stmt = stmt.where(Outfit.size == params.size.value)
        if params.min_price is not None:
            stmt = stmt.where(Outfit.price_per_day >= params.min_price)
        if params.max_price is not None:
            stmt = stmt.where(Outfit.price_per_day <= params.max_price)
        return stmt

    @staticmethod
    def _within_box(stmt: Select, center: Tuple[float, float], radius: float) -> Select:
        min_lat, max_lat, min_lon, max_lon = bounding_box(center[0], center[1], radius)
        stmt = stmt.where(
            Outfit.latitude.is_not(None),
            Outfit.longitude.is_not(None),
            Outfit.latitude.between(min_lat, max_lat),
        )
        # Boxes crossing the antimeridian are left to the exact distance check
        if min_lon >= -180 and max_lon <= 180:
            stmt = stmt.where(Outfit.longitude.between(min_lon, max_lon))
        return stmt

    @staticmethod
    def _within_radius(
        outfits: List[Outfit], center: Tuple[float, float], radius: float
    ) -> Tuple[List[Outfit], Dict[str, float]]:
        kept = []
        distances = {}
        for outfit in outfits:
            if outfit.latitude is None or outfit.longitude is None:
                continue
            distance = haversine_meters(center[0], center[1], outfit.latitude, outfit.longitude)
            if distance <= radius:
                kept.append(outfit)
                distances[outfit.id] = distance
        return kept, distances

    @staticmethod
    def _sort_columns(sort_by: str) -> tuple:
        if sort_by == "price-low":
            return Outfit.price_per_day.asc(), Outfit.created_at.desc(), Outfit.id
        if sort_by == "price-high":
            return Outfit.price_per_day.desc(), Outfit.created_at.desc(), Outfit.id
        if sort_by == "rating-high":
            return Outfit.rating.desc(), Outfit.created_at.desc(), Outfit.id
        # newest, and proximity without a search center
        return Outfit.created_at.desc(), Outfit.id

    @staticmethod
    def _sort_in_memory(outfits: List[Outfit], sort_by: str) -> List[Outfit]:
        """Field sort matching _sort_columns for candidates already in newest order."""
        if sort_by == "price-low":
            return sorted(outfits, key=lambda outfit: outfit.price_per_day)
        if sort_by == "price-high":
            return sorted(outfits, key=lambda outfit: -outfit.price_per_day)
        if sort_by == "rating-high":
            return sorted(outfits, key=lambda outfit: -outfit.rating)
        return outfits

    @staticmethod
    def _column_values(values: dict) -> dict:
        """Map JSON-mode schema values onto Outfit columns."""
        columns = {}
        for key in (
            "title",
            "description",
            "images",
            "size",
            "category",
            "style_tags",
            "price_per_hour",
            "price_per_day",
            "availability_dates",
        ):
            if key in values:
                columns[key] = values[key]
        for key in ("title", "description"):
            if isinstance(columns.get(key), str):
                columns[key] = columns[key].strip()
        if "location" in values:
            location = values["location"] or None
            columns["location"] = location
            columns["latitude"] = location.get("latitude") if location else None
            columns["longitude"] = location.get("longitude") if location else None
        return columns

    @staticmethod
    def _current_values(outfit: Outfit) -> dict:
        return {
            "title": outfit.title,
            "description": outfit.description,
            "images": outfit.images,
            "size": outfit.size,
            "category": outfit.category,
            "style_tags": outfit.style_tags,
            "price_per_hour": outfit.price_per_hour,
            "price_per_day": outfit.price_per_day,
            "location": outfit.location,
            "availability_dates": outfit.availability_dates,
        }
