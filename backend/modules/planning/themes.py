"""
modules/planning/themes.py
--------------------------
Fixed-template copy for a program: title, per-day themes, intros, closings.

Day themes are unique within one program; the set of used themes lives in
a DayThemer instance, never in module state.
"""

from __future__ import annotations

from typing import Optional

from modules.catalog.text import fold
from schemas.itinerary import ActivitySlot, ActivityType
from schemas.requests import GenerateProgramRequest
from schemas.venue import NONE_TAGS, Venue

Theme = tuple[str, str]   # (internal, client)


def city_label(city: str) -> str:
    return city.strip().title() or "Paris"


def program_title(request: GenerateProgramRequest) -> str:
    city = city_label(request.city)
    profile = request.profile.value
    duration = request.duration
    guests = request.guests

    nightlife = [t for t in request.nightlife_categories if t not in NONE_TAGS]
    museums = [t for t in request.museum_categories if t not in NONE_TAGS]
    is_couple = guests == 2 and profile == "couple"
    is_family = profile == "famille" or "enfant_famille" in request.activity_categories

    if is_couple and duration <= 3:
        return f"Escapade Romantique a {city}"
    if is_couple:
        return "Romance & Bien-etre" if request.wants_spa else f"Sejour Romantique a {city}"
    if guests >= 4 and nightlife:
        return "Sejour Festif entre Amis"
    if is_family:
        return f"{city} en Famille"
    if museums and duration >= 5 and ({"art_moderne", "incontournable"} & set(museums)):
        return "Immersion Art & Culture"
    if museums and duration >= 3:
        return f"Decouverte Culturelle de {city}"
    if request.wants_shopping and duration >= 3:
        return f"Shopping & Lifestyle a {city}"
    if request.wants_spa and duration >= 3:
        return f"Serenite & Bien-etre a {city}"
    if "cabarets" in nightlife:
        return f"{city}, Ville Lumiere"
    if nightlife:
        return f"Nuits de {city}"
    if guests == 1:
        return f"Decouverte Solo de {city}"

    by_profile = {
        "famille":  f"Sejour Familial a {city}",
        "couple":   f"Escapade Romantique a {city}",
        "vip":      f"Programme VIP {city}",
        "uhnw":     f"Experience Ultra-Luxe a {city}",
        "business": f"Programme Affaires {city}",
        "solo":     f"Decouverte Solo de {city}",
    }
    return by_profile.get(profile, f"{city} - {duration} jours")


class DayThemer:
    """Picks a day theme that has not been used earlier in the same program."""

    def __init__(self, city: str) -> None:
        self.city = city_label(city)
        self._used: set[str] = set()

    def _pick(self, candidates: list[Theme]) -> Theme:
        theme = next((t for t in candidates if t[1] not in self._used), candidates[0])
        self._used.add(theme[1])
        return theme

    def theme_for(
        self,
        day_number: int,
        duration: int,
        slots: list[ActivitySlot],
        is_cabaret_day: bool = False,
    ) -> Theme:
        n, city = day_number, self.city
        types = {s.type for s in slots if s.options}

        if n == 1:
            return self._pick([
                ("Jour 1: Arrivee & Premiere Decouverte", f"Premiers Pas a {city}"),
                (f"Jour 1: Bienvenue a {city}", "Premiers Pas dans la Ville"),
            ])
        if n == duration:
            return self._pick([(f"Jour {n}: Derniers Instants", f"Au Revoir {city}")])
        if is_cabaret_day:
            return self._pick([
                (f"Jour {n}: Soiree Spectacle", "Une Nuit au Cabaret"),
                (f"Jour {n}: Elegance & Spectacle", "Magie des Cabarets"),
            ])
        if ActivityType.CULTURE in types and ActivityType.NIGHTLIFE in types:
            return self._pick([
                (f"Jour {n}: Culture & Nuit", "Culture le Jour, Fete la Nuit"),
                (f"Jour {n}: Art & Festivites", "Des Musees aux Nuits Etoilees"),
            ])
        if ActivityType.WELLNESS in types:
            return self._pick([
                (f"Jour {n}: Bien-etre & Gastronomie", "Serenite & Gastronomie"),
                (f"Jour {n}: Pause Serenite", "Instant de Quietude"),
            ])
        if ActivityType.SHOPPING in types:
            return self._pick([
                (f"Jour {n}: Shopping & Elegance", "Mode & Shopping"),
                (f"Jour {n}: Boutiques de Prestige", f"{city}, Capitale de la Mode"),
            ])
        if ActivityType.CULTURE in types:
            return self._pick([
                (f"Jour {n}: Culture & Decouverte", "Decouverte Culturelle"),
                (f"Jour {n}: Patrimoine", f"Tresors de {city}"),
                (f"Jour {n}: Art & Histoire", "Voyage Artistique"),
            ])
        if ActivityType.NIGHTLIFE in types:
            return self._pick([
                (f"Jour {n}: Nuit en Ville", f"{city} by Night"),
                (f"Jour {n}: Soiree", "Lumieres de la Nuit"),
            ])
        return self._pick([
            (f"Jour {n}: Exploration", f"Au Coeur de {city}"),
            (f"Jour {n}: Journee Prestige", "Prestige & Elegance"),
            (f"Jour {n}: Escapade Unique", "Experiences Uniques"),
            (f"Jour {n}: Moments d'Exception", "Instants Privilegies"),
            (f"Jour {n}: Immersion", "L'Art de Vivre"),
            (f"Jour {n}: Decouverte", f"Journee a {city}"),
        ])


def intro_internal(duration: int, guests: int, transport: Optional[Venue]) -> str:
    intro = f"Programme de {duration} jours pour {guests} voyageur{'s' if guests > 1 else ''}."
    if transport is not None:
        intro += f"\n\nTRANSPORT: {transport.name}"
        if transport.phone:
            intro += f"\nTel: {transport.phone}"
        if transport.description:
            intro += f"\n{transport.description}"
    return intro


def intro_client(city: str, duration: int) -> str:
    return (
        f"Bienvenue a {city_label(city)}! Voici votre programme personnalise pour "
        f"{duration} jour{'s' if duration > 1 else ''} d'exception."
    )


def closing_internal(slot_count: int, attention_count: int) -> str:
    text = (
        f"Programme genere avec {slot_count} activites au total. "
        "Veuillez verifier les disponibilites et confirmer les reservations."
    )
    if attention_count:
        text += f" {attention_count} creneau(x) sans proposition a completer manuellement."
    return text


CLOSING_CLIENT = (
    "Nous esperons que ce programme vous plaira. "
    "N'hesitez pas a nous contacter pour toute modification."
)


def find_transport(transports: list[Venue], keyword: str) -> Optional[Venue]:
    keyword = fold(keyword)
    return next((t for t in transports if keyword in fold(t.name)), None)
