from .base import LatLng, MapMarker


def marker_for(record, title=None, url=""):
    """Marker for anything with id/latitude/longitude/location_name."""
    return MapMarker(
        id=str(record.id),
        position=LatLng.of(record.latitude, record.longitude),
        title=title or record.location_name,
        url=url,
    )


def markers_for(records, url_builder=None):
    return tuple(
        marker_for(record, url=url_builder(record) if url_builder else "")
        for record in records
    )


def selected_location_marker(latitude, longitude):
    """The single marker shown on the registration form once a point is picked."""
    if latitude in (None, "") or longitude in (None, ""):
        return ()
    position = LatLng.of(latitude, longitude)
    if not position.in_range:
        return ()
    return (MapMarker(id="selected", position=position, title="Selected Location"),)
