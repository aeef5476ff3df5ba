"""Sites: a named location holding one or more placed pitches."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pitchmarker.coordinates.context import PitchContext
from pitchmarker.coordinates.geometry import calculate_pitch_corners, clamp_rotation
from pitchmarker.coordinates.pitch_model import PITCH_CONFIGS, PitchConfig, get_pitch_config
from pitchmarker.coordinates.projection import GeoPoint


def _now() -> str:
    return datetime.now().isoformat()


@dataclass(frozen=True)
class SiteLocation:
    lat: float
    lng: float
    address: str = ''

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)


@dataclass(frozen=True)
class PitchEntry:
    """One pitch on a site: its size key, center and rotation."""

    size: str
    center: Optional[GeoPoint] = None
    rotation: int = 0
    added: str = field(default_factory=_now)
    modified: Optional[str] = None


@dataclass(frozen=True)
class Site:
    name: str
    location: SiteLocation
    pitches: Tuple[PitchEntry, ...] = ()
    created: str = field(default_factory=_now)
    modified: str = field(default_factory=_now)
    is_new_unsaved: bool = False

    def pitch_center(self, index: int) -> GeoPoint:
        """Center of a pitch, falling back to the site location."""
        return self.pitches[index].center or self.location.point


def create_site(location: SiteLocation) -> Site:
    """New site with a temporary name, to be named when first saved."""
    return Site(
        name=f"Unsaved Site ({location.address or 'New Location'})",
        location=location,
        is_new_unsaved=True,
    )


def rename_site(site: Site, name: Optional[str]) -> Site:
    """Rename a site. Blank names leave it unchanged."""
    if not name or not name.strip():
        return site
    return replace(site, name=name.strip(), modified=_now(), is_new_unsaved=False)


def add_pitch(site: Site, size: str, center: Optional[GeoPoint] = None,
              configs: Dict[str, PitchConfig] = None) -> Site:
    get_pitch_config(size, configs)
    entry = PitchEntry(size=size, center=center or site.location.point)
    return replace(site, pitches=site.pitches + (entry,))


def delete_pitch(site: Site, index: int) -> Site:
    if not 0 <= index < len(site.pitches):
        return site
    pitches = site.pitches[:index] + site.pitches[index + 1:]
    return replace(site, pitches=pitches)


def update_pitch_position(site: Site, index: int, center: Optional[GeoPoint],
                          rotation: Any) -> Site:
    if not 0 <= index < len(site.pitches):
        return site
    entry = replace(
        site.pitches[index],
        center=center or site.pitches[index].center,
        rotation=clamp_rotation(rotation),
        modified=_now(),
    )
    pitches = site.pitches[:index] + (entry,) + site.pitches[index + 1:]
    return replace(site, pitches=pitches)


def save_context(site: Site, index: int, context: PitchContext) -> Site:
    """Store a context's current center and rotation on a pitch entry."""
    return update_pitch_position(site, index, context.center(), context.rotation)


def pitch_context(site: Site, index: int,
                  configs: Dict[str, PitchConfig] = None) -> Optional[PitchContext]:
    """Center-anchored context for one pitch of the site."""
    if not 0 <= index < len(site.pitches):
        return None
    entry = site.pitches[index]
    context = PitchContext(config=get_pitch_config(entry.size, configs),
                           rotation=entry.rotation)
    return context.with_center(site.pitch_center(index))


def overlay_features(site: Site, active_index: int = 0,
                     configs: Dict[str, PitchConfig] = None) -> Dict[str, Any]:
    """
    GeoJSON FeatureCollection with one closed polygon per pitch, in
    [lng, lat] order, for map overlays.
    """
    configs = PITCH_CONFIGS if configs is None else configs
    features: List[Dict[str, Any]] = []
    for index, entry in enumerate(site.pitches):
        config = get_pitch_config(entry.size, configs)
        corners = calculate_pitch_corners(site.pitch_center(index), config,
                                          entry.rotation)
        ring = [list(c.to_lng_lat()) for c in corners]
        ring.append(ring[0])
        features.append({
            'type': 'Feature',
            'properties': {
                'pitchIndex': index,
                'isActive': index == active_index,
                'pitchName': config.name,
            },
            'geometry': {
                'type': 'Polygon',
                'coordinates': [ring],
            },
        })
    return {'type': 'FeatureCollection', 'features': features}


# =====================================================================
# SERIALIZATION
# =====================================================================

def site_to_dict(site: Site) -> Dict[str, Any]:
    data = {
        'name': site.name,
        'location': {
            'lat': site.location.lat,
            'lng': site.location.lng,
            'address': site.location.address,
        },
        'pitches': [
            {
                'size': p.size,
                'center': p.center.to_dict() if p.center else None,
                'rotation': p.rotation,
                'added': p.added,
                'modified': p.modified,
            }
            for p in site.pitches
        ],
        'created': site.created,
        'modified': site.modified,
    }
    if site.is_new_unsaved:
        data['isNewUnsaved'] = True
    return data


def site_from_dict(data: Dict[str, Any]) -> Site:
    loc = data['location']
    pitches = tuple(
        PitchEntry(
            size=p['size'],
            center=GeoPoint.from_dict(p['center']) if p.get('center') else None,
            rotation=clamp_rotation(p.get('rotation', 0)),
            added=p.get('added') or _now(),
            modified=p.get('modified'),
        )
        for p in data.get('pitches', [])
    )
    return Site(
        name=data['name'],
        location=SiteLocation(float(loc['lat']), float(loc['lng']),
                              loc.get('address', '')),
        pitches=pitches,
        created=data['created'],
        modified=data.get('modified', data['created']),
        is_new_unsaved=bool(data.get('isNewUnsaved', False)),
    )
