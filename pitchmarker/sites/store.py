"""JSON-file persistence for sites and finished marking summaries."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from pitchmarker.navigation.session import MarkingSummary
from pitchmarker.sites.site import Site, site_from_dict, site_to_dict
from pitchmarker.utils.io_handler import JSONWriter

logger = logging.getLogger(__name__)


class SiteStore:
    """
    Stores sites in one JSON file, keyed by (name, created).

    The marking core never reads from here; it only hands over values.
    """

    def __init__(self, sites_file: str, marked_pitches_file: str):
        self.sites_file = sites_file
        self.marked_pitches_file = marked_pitches_file

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'SiteStore':
        storage = config['storage']
        return cls(storage['sites_file'], storage['marked_pitches_file'])

    def _read(self) -> List[Dict[str, Any]]:
        return JSONWriter.load_results(self.sites_file, default=[])

    def list_sites(self) -> List[Site]:
        return [site_from_dict(d) for d in self._read()]

    def is_saved(self, site: Site) -> bool:
        return any(d['name'] == site.name and d['created'] == site.created
                   for d in self._read())

    def save_site(self, site: Site) -> Site:
        """Insert or update a site. Returns it with a fresh modified time."""
        site = replace(site, modified=datetime.now().isoformat())
        records = self._read()
        data = site_to_dict(site)
        for i, record in enumerate(records):
            if record['name'] == site.name and record['created'] == site.created:
                records[i] = data
                break
        else:
            records.append(data)
        JSONWriter.save_results(records, self.sites_file)
        logger.info("Saved site '%s' (%d pitches)", site.name, len(site.pitches))
        return site

    def load_site(self, name: str, created: str) -> Optional[Site]:
        for record in self._read():
            if record['name'] == name and record['created'] == created:
                return site_from_dict(record)
        return None

    def delete_site(self, name: str, created: str) -> bool:
        records = self._read()
        kept = [r for r in records
                if not (r['name'] == name and r['created'] == created)]
        if len(kept) == len(records):
            return False
        JSONWriter.save_results(kept, self.sites_file)
        logger.info("Deleted site '%s'", name)
        return True

    def save_summary(self, summary: MarkingSummary):
        """Append a finished marking to the marked pitches log."""
        saved = JSONWriter.load_results(self.marked_pitches_file, default=[])
        saved.append(summary.to_dict())
        JSONWriter.save_results(saved, self.marked_pitches_file)
        logger.info("Saved marking summary for %s (%d points)",
                    summary.pitch_name, len(summary.marked_points))

    def load_summaries(self) -> List[Dict[str, Any]]:
        return JSONWriter.load_results(self.marked_pitches_file, default=[])
