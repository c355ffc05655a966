# backend/puzzle_tracker/services/feed/feed_classifier.py
# Choix du type et du texte d'un item de feed à partir d'une transition de statut.

from __future__ import annotations

import random
from typing import Optional, Sequence

from puzzle_tracker.models.feed_item import FeedEvent
from puzzle_tracker.models.status import FeedItemType, PuzzleStatus
from puzzle_tracker.shared.constants import SECONDS_PER_HOUR, SECONDS_PER_MINUTE

WISHLIST = PuzzleStatus.WISHLIST
LIBRARY = PuzzleStatus.LIBRARY
IN_PROGRESS = PuzzleStatus.IN_PROGRESS
COMPLETED = PuzzleStatus.COMPLETED
ABANDONED = PuzzleStatus.ABANDONED

SOLVED_FALLBACK_TEXT = "🎯 Another puzzle conquered!"

START_TEXTS = (
    "🔥 Diving into a new puzzle challenge!",
    "🧩 Time to get puzzling with this one!",
    "⚡ Starting fresh on this puzzle adventure",
    "🎯 Let the puzzle solving begin!",
    "🚀 Embarking on a new jigsaw journey",
)

# Pools « ajout à une liste », indexés par statut cible puis statut d'origine (None = nouvel ajout)
ADD_TO_LIST_TEXTS: dict[PuzzleStatus, dict[Optional[PuzzleStatus], tuple[str, ...]]] = {
    LIBRARY: {
        WISHLIST: (
            "📚 Moved this puzzle from wishlist to library",
            "✅ Decided to get this puzzle - moved to library",
            "🎯 Ready to tackle this one - moved to library",
            "💪 This wishlist puzzle is now in my collection!",
        ),
        ABANDONED: (
            "🔄 Giving this puzzle another chance - back to library",
            "💭 Reconsidering this puzzle - moved to library",
            "🎯 This puzzle deserves another shot",
        ),
        None: (
            "📚 Added this beauty to the puzzle collection!",
            "⭐ Found a gem worth keeping - added to library",
            "🎯 This one caught my eye - saved for later!",
            "💎 Spotted this treasure and added to the collection",
            "🔖 Bookmarked this puzzle for future solving",
        ),
    },
    WISHLIST: {
        LIBRARY: (
            "⭐ Moved this puzzle back to the wishlist",
            "💭 Reconsidering this puzzle - back to wishlist",
            "🤔 This puzzle is back on my wishlist for now",
        ),
        ABANDONED: (
            "💭 Giving this puzzle some thought again",
            "⭐ This puzzle is back on my radar",
            "🤔 Reconsidering this puzzle for my wishlist",
        ),
        None: (
            "⭐ Added this puzzle to the wishlist",
            "💭 This puzzle caught my interest!",
            "🤔 Thinking about getting this puzzle",
            "👀 This puzzle is now on my radar",
            "⭐ Bookmarked this puzzle for consideration",
        ),
    },
}

# Textes des changements de statut courants : (origine, cible), origine None = toute origine
STATUS_CHANGE_TEXTS: dict[tuple[Optional[PuzzleStatus], PuzzleStatus], str] = {
    (IN_PROGRESS, ABANDONED): "⏸️ Taking a break from this puzzle for now",
    (None, ABANDONED): "📦 Decided to set this puzzle aside for now",
    (LIBRARY, WISHLIST): "⭐ Moved this puzzle back to the wishlist",
    (None, WISHLIST): "💭 Added this puzzle to the wishlist",
    (WISHLIST, LIBRARY): "📚 Moved this puzzle from wishlist to library",
    (ABANDONED, LIBRARY): "🔄 Giving this puzzle consideration again",
    (None, LIBRARY): "📚 Added this puzzle to the library",
    (ABANDONED, IN_PROGRESS): "🔄 Giving this puzzle another shot!",
    (COMPLETED, IN_PROGRESS): "🔄 Revisiting this completed puzzle",
    (WISHLIST, IN_PROGRESS): "🚀 Starting work on this wishlist puzzle",
    (LIBRARY, IN_PROGRESS): "🎯 Beginning work on this puzzle",
}

MINOR_TRANSITIONS = frozenset({(WISHLIST, LIBRARY), (LIBRARY, WISHLIST)})


class FeedEventClassifier:
    """Classification d'une transition de statut en événement de feed.

    Description:
        Règles évaluées dans l'ordre, la première qui s'applique gagne :
        1. entrée en `completed` → `solved` (texte selon le temps passé);
        2. entrée en `in-progress` → `puzzle_log` (phrase de démarrage);
        3. entrée en `library` → `add_to_list` (selon le statut d'origine);
        4. entrée en `wishlist` → `add_to_list` (selon le statut d'origine);
        5. photos jointes → `puzzle_log` (mise à jour photo);
        6. `in-progress` avec progression > 0 → `puzzle_log` (palier);
        7. autre changement de statut → `status_change`;
        8. sinon aucun événement.

        Le couple wishlist ↔ library est jugé trop mineur pour être diffusé quand
        `suppress_minor_transitions` est actif ; il est alors écarté avant la règle 3.
        Ne lève jamais d'exception et ne persiste rien.

    Args:
        rng (random.Random | None): Source aléatoire des phrases (seedable en test).
        suppress_minor_transitions (bool): Écarter wishlist ↔ library.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        suppress_minor_transitions: bool = True,
    ):
        self.rng = rng or random.Random()
        self.suppress_minor_transitions = suppress_minor_transitions

    def classify(
        self,
        old_status: PuzzleStatus | str | None,
        new_status: PuzzleStatus | str,
        progress: int | None = None,
        media_urls: Sequence[str] | None = None,
        *,
        time_spent_seconds: int | None = None,
    ) -> FeedEvent | None:
        """Classer une transition.

        Args:
            old_status: Statut précédent (None pour un log neuf).
            new_status: Nouveau statut.
            progress: Progression après la transition.
            media_urls: Photos jointes à la mise à jour.
            time_spent_seconds: Temps de résolution, pour le texte `solved`.

        Returns:
            FeedEvent | None: Événement à diffuser, None si rien à diffuser.
        """
        old = _as_status(old_status)
        new = _as_status(new_status)
        if new is None:
            return None
        media = list(media_urls or [])

        if self.suppress_minor_transitions and (old, new) in MINOR_TRANSITIONS:
            return None

        if new is COMPLETED and old is not COMPLETED:
            return FeedEvent(
                type=FeedItemType.SOLVED, text=solved_text(time_spent_seconds), media_urls=media
            )

        if new is IN_PROGRESS and old is not IN_PROGRESS:
            return FeedEvent(
                type=FeedItemType.PUZZLE_LOG, text=self._pick(START_TEXTS), media_urls=media
            )

        if new in (LIBRARY, WISHLIST) and old is not new:
            pools = ADD_TO_LIST_TEXTS[new]
            pool = pools.get(old) if old in (LIBRARY, WISHLIST, ABANDONED) else None
            return FeedEvent(
                type=FeedItemType.ADD_TO_LIST,
                text=self._pick(pool or pools[None]),
                media_urls=media,
            )

        if media:
            return FeedEvent(
                type=FeedItemType.PUZZLE_LOG, text=photo_text(new, progress), media_urls=media
            )

        if new is IN_PROGRESS and progress and progress > 0:
            return FeedEvent(
                type=FeedItemType.PUZZLE_LOG, text=milestone_text(progress), media_urls=media
            )

        if old is not None and old is not new:
            return FeedEvent(
                type=FeedItemType.STATUS_CHANGE, text=status_change_text(old, new), media_urls=media
            )

        return None

    def _pick(self, pool: Sequence[str]) -> str:
        return self.rng.choice(pool)


def _as_status(value: PuzzleStatus | str | None) -> PuzzleStatus | None:
    # Une valeur inconnue est traitée comme absente : pas d'exception ici
    if value is None or isinstance(value, PuzzleStatus):
        return value
    try:
        return PuzzleStatus(value)
    except ValueError:
        return None


def solved_text(time_spent_seconds: int | None) -> str:
    """Texte `solved` selon le temps passé (paliers > 24h, > 8h, > 2h, > 0h, > 30 min)."""
    if not time_spent_seconds or time_spent_seconds < 0:
        return SOLVED_FALLBACK_TEXT

    hours = time_spent_seconds // SECONDS_PER_HOUR
    minutes = (time_spent_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE

    if hours > 24:
        return f"✨ Completed this challenging puzzle after {hours // 24} days of work!"
    if hours > 8:
        return f"🏆 Finished this puzzle after a marathon {hours}h {minutes}m session!"
    if hours > 2:
        return f"🧩 Solved this puzzle in {hours}h {minutes}m - what a great workout for the brain!"
    if hours > 0:
        return f"⚡ Quick solve! Completed this puzzle in just {hours}h {minutes}m"
    if minutes > 30:
        return f"🚀 Speed run! Finished this puzzle in {minutes} minutes"
    return f"💨 Lightning fast! Solved in under {minutes} minutes"


def photo_text(status: PuzzleStatus, progress: int | None) -> str:
    if status is COMPLETED:
        return "📸 Shared new photos of this completed puzzle!"
    if progress and progress > 0:
        return f"📸 Progress update with photos - {progress}% complete!"
    return "📸 Shared new photos of this puzzle"


def milestone_text(progress: int) -> str:
    if progress >= 90:
        return f"🏁 Almost there! {progress}% complete - the final stretch!"
    if progress >= 75:
        return f"🔥 Making great progress! {progress}% done - getting close!"
    if progress >= 50:
        return f"⚡ Halfway milestone reached! {progress}% complete and going strong"
    if progress >= 25:
        return f"🧩 Making steady progress - {progress}% complete!"
    return f"🚀 Getting started! {progress}% complete on this puzzle"


def status_change_text(old: PuzzleStatus, new: PuzzleStatus) -> str:
    """Texte d'un changement de statut : phrase dédiée ou « origine → cible »."""
    text = STATUS_CHANGE_TEXTS.get((old, new)) or STATUS_CHANGE_TEXTS.get((None, new))
    if text:
        return text
    return f"🔄 Updated status: {old.label} → {new.label}"
