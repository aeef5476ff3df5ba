"""Basic usage example: place a 5v5 pitch and walk its waypoints."""

from pitchmarker import MarkingController
from pitchmarker.coordinates.pitch_model import get_pitch_config
from pitchmarker.coordinates.projection import GeoPoint, from_offset
from pitchmarker.navigation.location import LocationFeed, LocationFix
from pitchmarker.sites.store import SiteStore
from pitchmarker.utils.io_handler import save_image
from pitchmarker.utils.visualization import render_pitch_diagram


def main():
    """Simulate walking to every point of a 5v5 pitch."""
    feed = LocationFeed()
    store = SiteStore("output/sites.json", "output/marked_pitches.json")
    controller = MarkingController(feed, store=store)

    # Position the pitch
    config = get_pitch_config('5v5')
    controller.select_pitch(config, GeoPoint(51.5, -0.1))
    controller.set_rotation(30)

    print("Starting marking...")
    controller.begin()

    for waypoint in controller.session.waypoints:
        # Approach from 15 m south, then stand on the point
        start = from_offset(waypoint.point, 0.0, -15.0)
        feed.push(LocationFix(start.lat, start.lng, accuracy=3.0, heading=0.0))
        print(f"{waypoint.name}: {controller.reading.distance_m:.1f}m, "
              f"{controller.reading.instruction}")

        feed.push(LocationFix(waypoint.lat, waypoint.lng, accuracy=3.0))
        controller.mark()

    # Save diagram before finishing ends the session
    diagram = render_pitch_diagram(config, controller.session.waypoints,
                                   controller.statuses())
    save_image(diagram, "output/pitch_diagram.png")

    summary = controller.finish()
    print(f"Marked {len(summary.marked_points)} points on {summary.pitch_name}, "
          f"average accuracy {summary.average_accuracy:.1f}m")


if __name__ == "__main__":
    main()
