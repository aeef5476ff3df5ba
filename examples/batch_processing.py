"""Batch example: overlays and diagrams for every pitch on a site."""

from pitchmarker.config import load_config
from pitchmarker.coordinates.pitch_model import PITCH_CONFIGS
from pitchmarker.sites.site import SiteLocation, add_pitch, create_site, overlay_features, rename_site
from pitchmarker.sites.store import SiteStore
from pitchmarker.utils.io_handler import save_image, JSONWriter
from pitchmarker.utils.logger import setup_logger
from pitchmarker.utils.visualization import render_pitch_diagram


def main():
    """Lay out one pitch of each size and export them."""
    logger = setup_logger('batch_processor')
    config = load_config()

    site = create_site(SiteLocation(51.5, -0.1, 'Hackney Marshes'))
    site = rename_site(site, 'Hackney Marshes')
    for size in PITCH_CONFIGS:
        site = add_pitch(site, size)

    logger.info(f"Exporting {len(site.pitches)} pitches...")

    for i, entry in enumerate(site.pitches):
        logger.info(f"Rendering pitch {i+1}/{len(site.pitches)}: {entry.size}")
        diagram = render_pitch_diagram(PITCH_CONFIGS[entry.size],
                                       settings=config['diagram'])
        save_image(diagram, f"output/diagrams/{entry.size}.png")

    # Save results
    JSONWriter.save_results(overlay_features(site), "output/site_overlay.geojson")
    SiteStore("output/sites.json", "output/marked_pitches.json").save_site(site)
    logger.info("Batch export complete!")


if __name__ == "__main__":
    main()
