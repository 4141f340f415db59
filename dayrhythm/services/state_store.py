"""
Planner state store for DayRhythm.

Single owner of the AppState. Every change goes through commit(), which:
1. Deep-copies the current snapshot
2. Runs the mutation against the copy
3. Encodes the copy and queues it on the serial writer
4. Publishes the copy as the new snapshot
5. Notifies subscribers

The whole commit body runs under one re-entrant lock, so commits issued
from different threads never interleave and each sees the previous one.
Readers take `store.state` without locking and must treat it as read-only.

Lookup misses (unknown day key, variant id, spot id, template id) are
silent no-ops: helpers return None/False instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime
from pathlib import Path
from threading import RLock
from typing import TypeVar
from uuid import UUID, uuid4

from dayrhythm.lib.exceptions import SerializationError, ValidationError
from dayrhythm.models import (
    MIN_SPOT_DURATION_MIN,
    AppState,
    CareProduct,
    DayPlan,
    DayZone,
    EnergyRhythm,
    FixKind,
    PetProfile,
    PetReaction,
    PlannerConfig,
    Spot,
    SpotTemplate,
    Variant,
    XPReward,
    day_key,
    parse_day_key,
    utc_now,
)
from dayrhythm.services import overload_engine, undo
from dayrhythm.services.overload_engine import FixSuggestion
from dayrhythm.services.persistence import SerialWriter, decode_state, encode_state
from dayrhythm.services.stats import PlannerStats, compute_stats

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[AppState], None]

LIGHTER_VARIANT_TITLE = "Lighter Variant"


def normalize_zone_order(
    variant: Variant,
    zone: DayZone,
    leading_spot_id: UUID | None = None,
) -> None:
    """
    Reassign dense 0..N-1 sort indices to the spots of one zone.

    Spots keep their relative order by current sort_index. On an index
    collision the leading spot (typically the one just moved) sorts first;
    other ties keep list order. Idempotent.
    """
    members = [s for s in variant.spots if s.zone == zone]
    members.sort(key=lambda s: (s.sort_index, 0 if s.id == leading_spot_id else 1))
    for idx, spot in enumerate(members):
        spot.sort_index = idx


def fresh_variant_copy(source: Variant, title: str | None = None) -> Variant:
    """Deep copy of a variant with new identities and timestamps throughout."""
    now = utc_now()
    copy = source.model_copy(deep=True)
    copy.id = uuid4()
    copy.created_at = now
    copy.updated_at = now
    if title is not None:
        copy.title = title
    for spot in copy.spots:
        spot.id = uuid4()
        spot.created_at = now
        spot.updated_at = now
    return copy


def _as_date(day: date | datetime) -> date:
    return day.date() if isinstance(day, datetime) else day


class PlannerStore:
    """
    Single-writer store for the whole planner state.

    One instance is created at process start and passed to its consumers.
    """

    def __init__(self, path: Path, *, writer: SerialWriter | None = None):
        """
        Initialize the store and load the state file.

        Args:
            path: Location of the state document
            writer: Serial writer to persist through (created for `path` if None)
        """
        self.path = Path(path)
        self._writer = writer or SerialWriter(self.path)
        self._lock = RLock()
        self._listeners: list[Listener] = []
        self._state = self._load()

    # =========================================================================
    # Load / Commit
    # =========================================================================

    def _load(self) -> AppState:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.info("No state file at %s, starting fresh", self.path)
            return self._fresh_state()
        except OSError as e:
            logger.warning("Could not read state file %s: %s", self.path, e)
            return self._fresh_state()

        try:
            state = decode_state(raw)
        except SerializationError as e:
            logger.warning("Corrupt state file %s, resetting to defaults: %s", self.path, e)
            return self._fresh_state()

        logger.info("Loaded state with %d day plan(s) from %s", len(state.day_plans), self.path)
        return state

    def _fresh_state(self) -> AppState:
        state = AppState()
        self._persist(state)
        return state

    def _persist(self, state: AppState) -> None:
        try:
            data = encode_state(state)
        except SerializationError as e:
            logger.error("Skipping persist, state could not be encoded: %s", e)
            return
        self._writer.submit(data)

    @property
    def state(self) -> AppState:
        """Current published snapshot (read-only by convention)."""
        return self._state

    def commit(self, mutation: Callable[[AppState], T]) -> T:
        """
        Apply a mutation to a copy of the state and publish it.

        If the mutation raises, the copy is discarded and the exception
        propagates; the published state is unchanged.

        Returns:
            Whatever the mutation returned
        """
        with self._lock:
            draft = self._state.model_copy(deep=True)
            result = mutation(draft)
            self._persist(draft)
            self._state = draft
            self._notify(draft)
            return result

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with every new snapshot.

        Returns:
            A callable that unregisters the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, snapshot: AppState) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error("State listener %r failed: %s", listener, e, exc_info=True)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every queued write has reached the disk."""
        return self._writer.flush(timeout)

    def close(self) -> None:
        """Flush pending writes and stop the writer."""
        self._writer.flush()
        self._writer.close()

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _mutate_active(
        self,
        key: str,
        fn: Callable[[AppState, DayPlan, Variant], T | None],
    ) -> T | None:
        """
        Run fn against the active variant of a plan, inside one commit.

        Timestamps of the variant and plan are bumped only when fn returns a
        non-None result (None means the target was not found).
        """

        def mutation(state: AppState) -> T | None:
            plan = state.day_plan(key)
            if plan is None:
                return None
            variant = plan.active_variant
            if variant is None:
                return None
            result = fn(state, plan, variant)
            if result is not None:
                now = utc_now()
                variant.updated_at = now
                plan.updated_at = now
            return result

        return self.commit(mutation)

    # =========================================================================
    # Day Plans
    # =========================================================================

    def ensure_day_plan(self, day: date | datetime) -> DayPlan:
        """Get or create the plan for a calendar day."""
        key = day_key(day)
        existing = self._state.day_plan(key)
        if existing is not None:
            return existing

        def mutation(state: AppState) -> DayPlan:
            plan = state.day_plan(key)
            if plan is None:
                plan = DayPlan.blank(_as_date(day), rhythm=state.config.default_rhythm)
                state.day_plans.append(plan)
                logger.debug("Created day plan %s", key)
            return plan

        return self.commit(mutation)

    def ensure_today_plan(self) -> DayPlan:
        return self.ensure_day_plan(date.today())

    def update_day_plan(self, key: str, mutation: Callable[[DayPlan], T]) -> T | None:
        """Mutate a plan in place and bump its updated_at. No-op if missing."""

        def apply(state: AppState) -> T | None:
            plan = state.day_plan(key)
            if plan is None:
                return None
            result = mutation(plan)
            plan.updated_at = utc_now()
            return result

        return self.commit(apply)

    def delete_day_plan(self, key: str) -> None:
        def mutation(state: AppState) -> None:
            state.day_plans = [p for p in state.day_plans if p.day_key != key]

        self.commit(mutation)

    def copy_day_plan(self, from_key: str, to_day: date | datetime) -> DayPlan | None:
        """
        Copy a plan to another day, replacing any plan already there.

        Every plan, variant and spot id in the copy is fresh. The copy selects
        the counterpart of the source's active variant.
        """
        to_date = _as_date(to_day)
        to_key = day_key(to_date)

        def mutation(state: AppState) -> DayPlan | None:
            source = state.day_plan(from_key)
            if source is None:
                return None

            variants = [fresh_variant_copy(v) for v in source.variants]
            selected_id = None
            active = source.active_variant
            if active is not None:
                position = next(i for i, v in enumerate(source.variants) if v.id == active.id)
                selected_id = variants[position].id

            copy = DayPlan(
                date_start=to_date,
                day_key=to_key,
                selected_variant_id=selected_id,
                variants=variants,
            )
            state.day_plans = [p for p in state.day_plans if p.day_key != to_key]
            state.day_plans.append(copy)
            return copy

        return self.commit(mutation)

    def copy_variant_to_day(
        self,
        from_day_key: str,
        variant_id: UUID,
        to_day: date | datetime,
    ) -> DayPlan | None:
        """Replace the target day's plan with one holding a copy of a single variant."""
        to_date = _as_date(to_day)
        to_key = day_key(to_date)

        def mutation(state: AppState) -> DayPlan | None:
            source_plan = state.day_plan(from_day_key)
            source = source_plan.variant(variant_id) if source_plan else None
            if source is None:
                return None

            new_variant = fresh_variant_copy(source)
            plan = DayPlan.blank(to_date, rhythm=source.rhythm)
            plan.variants = [new_variant]
            plan.selected_variant_id = new_variant.id

            state.day_plans = [p for p in state.day_plans if p.day_key != to_key]
            state.day_plans.append(plan)
            return plan

        return self.commit(mutation)

    # =========================================================================
    # Variants
    # =========================================================================

    def add_variant(
        self,
        key: str,
        title: str,
        copy_from_variant_id: UUID | None = None,
    ) -> Variant | None:
        """
        Add a variant to a day and select it.

        The plan is created from the day key when missing. With a source id,
        the source's spots are copied with fresh ids; otherwise the new
        variant is empty and takes the active variant's rhythm.
        """
        try:
            plan_date = parse_day_key(key)
        except ValidationError:
            logger.debug("add_variant ignored invalid day key %r", key)
            return None

        def mutation(state: AppState) -> Variant:
            plan = state.day_plan(key)
            if plan is None:
                plan = DayPlan.blank(plan_date, rhythm=state.config.default_rhythm)
                state.day_plans.append(plan)

            source = plan.variant(copy_from_variant_id) if copy_from_variant_id else None
            if source is not None:
                new_variant = fresh_variant_copy(source, title=title)
            else:
                active = plan.active_variant
                new_variant = Variant(
                    title=title,
                    rhythm=active.rhythm if active else EnergyRhythm.NORMAL,
                )
            new_variant.is_primary = False

            plan.variants.append(new_variant)
            plan.selected_variant_id = new_variant.id
            plan.updated_at = utc_now()
            return new_variant

        return self.commit(mutation)

    def delete_variant(self, key: str, variant_id: UUID) -> bool:
        """
        Delete a variant. Refused when it is the plan's only variant.

        Returns:
            True if a variant was removed
        """

        def mutation(plan: DayPlan) -> bool:
            if len(plan.variants) <= 1 or plan.variant(variant_id) is None:
                return False
            plan.variants = [v for v in plan.variants if v.id != variant_id]
            if plan.selected_variant_id == variant_id:
                plan.selected_variant_id = plan.variants[0].id
            return True

        return bool(self.update_day_plan(key, mutation))

    def select_variant(self, key: str, variant_id: UUID) -> bool:
        def mutation(plan: DayPlan) -> bool:
            if plan.variant(variant_id) is None:
                return False
            plan.selected_variant_id = variant_id
            return True

        return bool(self.update_day_plan(key, mutation))

    def switch_rhythm(self, key: str, rhythm: EnergyRhythm) -> Variant | None:
        def fn(state: AppState, plan: DayPlan, variant: Variant) -> Variant:
            variant.rhythm = rhythm
            return variant

        return self._mutate_active(key, fn)

    # =========================================================================
    # Spots
    # =========================================================================

    def add_spot(self, key: str, spot: Spot) -> Spot | None:
        """Append a spot to the end of its zone in the active variant. Undoable."""

        def fn(state: AppState, plan: DayPlan, variant: Variant) -> Spot:
            new_spot = spot.model_copy(deep=True)
            new_spot.sort_index = variant.next_sort_index(new_spot.zone)
            variant.spots.append(new_spot)
            state.last_action = undo.record_add(key, variant.id, new_spot.id)
            return new_spot

        return self._mutate_active(key, fn)

    def add_spot_from_template(
        self,
        key: str,
        template_id: UUID,
        zone: DayZone = DayZone.DAYTIME,
    ) -> Spot | None:
        """Instantiate a template into the active variant and count the usage. Undoable."""

        def fn(state: AppState, plan: DayPlan, variant: Variant) -> Spot | None:
            template = state.template(template_id)
            if template is None:
                return None
            spot = template.to_spot(zone, buffer_default=state.config.default_buffer_between_min)
            spot.sort_index = variant.next_sort_index(zone)
            variant.spots.append(spot)

            template.usage_count += 1
            template.last_used_at = utc_now()

            state.last_action = undo.record_add(key, variant.id, spot.id)
            return spot

        return self._mutate_active(key, fn)

    def update_spot(self, key: str, spot_id: UUID, mutation: Callable[[Spot], None]) -> Spot | None:
        """
        Edit a spot of the active variant. Undoable.

        Duration is clamped to MIN_SPOT_DURATION_MIN after the mutation.
        """

        def fn(state: AppState, plan: DayPlan, variant: Variant) -> Spot | None:
            spot = variant.spot(spot_id)
            if spot is None:
                return None
            record = undo.record_edit(key, variant.id, spot)
            mutation(spot)
            spot.duration_min = max(MIN_SPOT_DURATION_MIN, spot.duration_min)
            spot.updated_at = utc_now()
            state.last_action = record
            return spot

        return self._mutate_active(key, fn)

    def delete_spot(self, key: str, spot_id: UUID) -> bool:
        """Remove a spot from the active variant. Undoable."""

        def fn(state: AppState, plan: DayPlan, variant: Variant) -> bool | None:
            position = variant.spot_position(spot_id)
            if position is None:
                return None
            removed = variant.spots.pop(position)
            state.last_action = undo.record_delete(key, variant.id, removed)
            return True

        return bool(self._mutate_active(key, fn))

    def move_spot(self, key: str, spot_id: UUID, to_zone: DayZone, to_index: int) -> bool:
        """
        Move a spot to a zone and index, then renormalize both zones. Undoable.

        The moved spot wins index collisions in its new zone, so it lands
        before the spot that previously held to_index.
        """

        def fn(state: AppState, plan: DayPlan, variant: Variant) -> bool | None:
            spot = variant.spot(spot_id)
            if spot is None:
                return None
            record = undo.record_move(key, variant.id, spot)

            old_zone = spot.zone
            spot.zone = to_zone
            spot.sort_index = to_index
            spot.updated_at = utc_now()

            normalize_zone_order(variant, old_zone, leading_spot_id=spot.id)
            if old_zone != to_zone:
                normalize_zone_order(variant, to_zone, leading_spot_id=spot.id)

            state.last_action = record
            return True

        return bool(self._mutate_active(key, fn))

    def reorder_spots(self, key: str, zone: DayZone, ordered_ids: Iterable[UUID]) -> bool:
        """Apply a drag-and-drop order to one zone. Ids from other zones are ignored."""

        def fn(state: AppState, plan: DayPlan, variant: Variant) -> bool:
            for new_index, spot_id in enumerate(ordered_ids):
                spot = variant.spot(spot_id)
                if spot is not None and spot.zone == zone:
                    spot.sort_index = new_index
            normalize_zone_order(variant, zone)
            return True

        return bool(self._mutate_active(key, fn))

    # =========================================================================
    # Fixes
    # =========================================================================

    def apply_suggestion(self, key: str, suggestion: FixSuggestion) -> Variant | None:
        """
        Apply an engine suggestion to the active variant. Undoable.

        Undo mapping:
            compress, move_zone  apply_fix with the pre-fix spot snapshot
            remove_spot          delete_spot, so undo re-appends the spot
            insert_break         add_spot for the new break
            create_variant       adds a lighter copy of the active variant;
                                 nothing is recorded

        Returns:
            The updated (or newly created) variant, or None on a miss
        """

        def fn(state: AppState, plan: DayPlan, variant: Variant) -> Variant | None:
            if suggestion.kind is FixKind.CREATE_VARIANT:
                lighter = fresh_variant_copy(variant, title=LIGHTER_VARIANT_TITLE)
                lighter.is_primary = False
                plan.variants.append(lighter)
                plan.selected_variant_id = lighter.id
                return lighter

            record = None
            if suggestion.kind in (FixKind.COMPRESS, FixKind.MOVE_ZONE, FixKind.REMOVE_SPOT):
                target = variant.spot(suggestion.target_spot_id) if suggestion.target_spot_id else None
                if target is None:
                    return None
                if suggestion.kind is FixKind.REMOVE_SPOT:
                    record = undo.record_delete(key, variant.id, target)
                else:
                    record = undo.record_fix(key, variant.id, target)

            updated = overload_engine.apply_suggestion(suggestion, variant, state.config)

            if suggestion.kind is FixKind.INSERT_BREAK:
                before = {s.id for s in variant.spots}
                new_ids = [s.id for s in updated.spots if s.id not in before]
                if new_ids:
                    record = undo.record_add(key, variant.id, new_ids[0])

            position = next(i for i, v in enumerate(plan.variants) if v.id == variant.id)
            plan.variants[position] = updated
            if record is not None:
                state.last_action = record
            return updated

        return self._mutate_active(key, fn)

    # =========================================================================
    # Undo
    # =========================================================================

    @property
    def can_undo(self) -> bool:
        return self._state.last_action is not None

    def undo_last_action(self) -> bool:
        """
        Reverse the action in the undo slot.

        The slot is cleared only when the reversal succeeds.

        Returns:
            True on success, False if the slot is empty or the target is gone
        """

        def mutation(state: AppState) -> bool:
            record = state.last_action
            if record is None:
                return False
            plan = state.day_plan(record.day_key)
            if plan is None or not undo.reverse(record, plan):
                logger.info("Undo of %s failed: target no longer exists", record.action_kind)
                return False
            state.last_action = None
            return True

        if self._state.last_action is None:
            return False
        return self.commit(mutation)

    # =========================================================================
    # Templates
    # =========================================================================

    def add_template(self, template: SpotTemplate) -> None:
        self.commit(lambda state: state.templates.append(template.model_copy(deep=True)))

    def update_template(
        self,
        template_id: UUID,
        mutation: Callable[[SpotTemplate], None],
    ) -> SpotTemplate | None:
        def apply(state: AppState) -> SpotTemplate | None:
            template = state.template(template_id)
            if template is None:
                return None
            mutation(template)
            template.updated_at = utc_now()
            return template

        return self.commit(apply)

    def delete_template(self, template_id: UUID) -> None:
        def mutation(state: AppState) -> None:
            state.templates = [t for t in state.templates if t.id != template_id]

        self.commit(mutation)

    def increment_template_usage(self, template_id: UUID) -> SpotTemplate | None:
        def mutation(template: SpotTemplate) -> None:
            template.usage_count += 1
            template.last_used_at = utc_now()

        return self.update_template(template_id, mutation)

    # =========================================================================
    # XP & Progress
    # =========================================================================

    def earn_xp(self, amount: int) -> int:
        """Add XP. Returns the new total."""

        def mutation(state: AppState) -> int:
            state.progress.earn_xp(amount)
            return state.progress.total_xp

        return self.commit(mutation)

    def record_active_day(self, day: date | datetime | None = None) -> int:
        """Mark a day (default today) as active. Returns the current streak."""
        key = day_key(day or date.today())

        def mutation(state: AppState) -> int:
            state.progress.record_active_day(key)
            return state.progress.current_streak

        return self.commit(mutation)

    def record_milestone(self, milestone: str) -> bool:
        """Record a milestone once. Returns True if it was new."""

        def mutation(state: AppState) -> bool:
            if milestone in state.progress.achieved_milestones:
                return False
            state.progress.achieved_milestones.append(milestone)
            state.progress.updated_at = utc_now()
            return True

        return self.commit(mutation)

    # =========================================================================
    # Identity
    # =========================================================================

    def update_avatar(self, emoji: str) -> None:
        def mutation(state: AppState) -> None:
            state.identity.avatar_emoji = emoji
            state.identity.updated_at = utc_now()

        self.commit(mutation)

    def update_display_name(self, name: str) -> None:
        def mutation(state: AppState) -> None:
            state.identity.display_name = name
            state.identity.updated_at = utc_now()

        self.commit(mutation)

    # =========================================================================
    # Pet Care
    # =========================================================================

    def add_pet_profile(self, pet: PetProfile) -> None:
        self.commit(lambda state: state.pet_profiles.append(pet.model_copy(deep=True)))

    def delete_pet_profile(self, pet_id: UUID) -> None:
        """Delete a pet and every reaction recorded for it."""

        def mutation(state: AppState) -> None:
            state.pet_profiles = [p for p in state.pet_profiles if p.id != pet_id]
            state.pet_reactions = [r for r in state.pet_reactions if r.pet_id != pet_id]

        self.commit(mutation)

    def add_care_product(self, product: CareProduct) -> None:
        self.commit(lambda state: state.care_products.append(product.model_copy(deep=True)))

    def delete_care_product(self, product_id: UUID) -> None:
        """Delete a product and every reaction recorded against it."""

        def mutation(state: AppState) -> None:
            state.care_products = [p for p in state.care_products if p.id != product_id]
            state.pet_reactions = [r for r in state.pet_reactions if r.product_id != product_id]

        self.commit(mutation)

    def add_pet_reaction(self, reaction: PetReaction) -> None:
        def mutation(state: AppState) -> None:
            state.pet_reactions.append(reaction.model_copy(deep=True))
            state.progress.earn_xp(XPReward.ADD_PET_REACTION)

        self.commit(mutation)

    def delete_pet_reaction(self, reaction_id: UUID) -> None:
        def mutation(state: AppState) -> None:
            state.pet_reactions = [r for r in state.pet_reactions if r.id != reaction_id]

        self.commit(mutation)

    def reactions_for_pet(self, pet_id: UUID) -> list[PetReaction]:
        return [r for r in self._state.pet_reactions if r.pet_id == pet_id]

    def reactions_for_product(self, product_id: UUID) -> list[PetReaction]:
        return [r for r in self._state.pet_reactions if r.product_id == product_id]

    def average_rating(self, product_id: UUID) -> float | None:
        """Mean rating of a product across all pets, or None if unrated."""
        relevant = self.reactions_for_product(product_id)
        if not relevant:
            return None
        return sum(int(r.rating) for r in relevant) / len(relevant)

    # =========================================================================
    # Config & Onboarding
    # =========================================================================

    def update_config(self, mutation: Callable[[PlannerConfig], None]) -> PlannerConfig:
        def apply(state: AppState) -> PlannerConfig:
            mutation(state.config)
            state.config.updated_at = utc_now()
            return state.config

        return self.commit(apply)

    def apply_onboarding(
        self,
        rhythm: EnergyRhythm,
        buffer_min: int,
        travel_min: int,
        template_ids: list[UUID],
        zone_for_index: Callable[[int, int], DayZone] | None = None,
    ) -> DayPlan:
        """
        Apply every onboarding choice in a single commit.

        Sets config defaults, creates today's plan, adds one spot per chosen
        template, counts template usage, awards XP and marks today active.

        Args:
            zone_for_index: Maps (index, count) to the zone of each template's
                spot (spreads them evenly across zones if None)
        """
        zone_for_index = zone_for_index or _spread_zone
        today = date.today()
        today_key = day_key(today)

        def mutation(state: AppState) -> DayPlan:
            state.config.default_rhythm = rhythm
            state.config.default_buffer_between_min = buffer_min
            state.config.default_travel_min = travel_min
            state.config.updated_at = utc_now()
            state.has_completed_onboarding = True

            plan = state.day_plan(today_key)
            if plan is None:
                plan = DayPlan.blank(today, rhythm=rhythm)
                state.day_plans.append(plan)

            variant = plan.active_variant
            if variant is not None:
                variant.rhythm = rhythm
                templates = [t for t in (state.template(tid) for tid in template_ids) if t]
                for index, template in enumerate(templates):
                    zone = zone_for_index(index, len(templates))
                    spot = template.to_spot(zone, buffer_default=buffer_min)
                    spot.travel_before_min = travel_min
                    spot.sort_index = variant.next_sort_index(zone)
                    variant.spots.append(spot)

                    template.usage_count += 1
                    template.last_used_at = utc_now()
                variant.updated_at = utc_now()
                plan.updated_at = utc_now()

            state.progress.earn_xp(XPReward.COMPLETE_ONBOARDING + XPReward.CREATE_DAY_PLAN)
            state.progress.record_active_day(today_key)
            return plan

        return self.commit(mutation)

    def complete_onboarding(self) -> None:
        def mutation(state: AppState) -> None:
            state.has_completed_onboarding = True
            state.progress.earn_xp(XPReward.COMPLETE_ONBOARDING)

        self.commit(mutation)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def compute_stats(self) -> PlannerStats:
        return compute_stats(self._state)

    def export_json(self) -> bytes:
        """Serialize the current state in the on-disk document format."""
        return encode_state(self._state)

    def reset_all_data(self) -> None:
        """Replace everything with a fresh default state."""
        fresh = AppState()

        def mutation(state: AppState) -> None:
            for name in AppState.model_fields:
                setattr(state, name, getattr(fresh, name))

        self.commit(mutation)
        logger.warning("All planner data was reset")

    @property
    def file_size_bytes(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError:
            return 0

    @property
    def file_size_formatted(self) -> str:
        size = self.file_size_bytes
        if size < 1024:
            return f"{size} B"
        if size < 1024 * 1024:
            return f"{size // 1024} KB"
        return f"{size / (1024 * 1024):.1f} MB"


def _spread_zone(index: int, count: int) -> DayZone:
    """Spread count items evenly over morning, daytime and evening."""
    zones = list(DayZone)
    if count <= 0:
        return DayZone.DAYTIME
    return zones[min(len(zones) - 1, index * len(zones) // count)]
