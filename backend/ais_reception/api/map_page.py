"""
HTML page embedding filtered positions and beam statistics in a Google Maps view.
"""

import json
from urllib.parse import quote

from ais_reception.api.schemas import MapDataResponse


GOOGLE_MAPS_SCRIPT = (
    "https://maps.googleapis.com/maps/api/js"
    "?key={key}&libraries=geometry,marker&callback=initMap&loading=async"
)

NM_TO_M = 1852
DEFAULT_PORT = 9001


def _script_json(value) -> str:
    # Keep "</script>" inside strings from closing the tag
    return json.dumps(value).replace("</", "<\\/")


_PAGE = """<!DOCTYPE html>
<html>
<head>
<title>AIS Reception</title>
<script>
const mapData = __MAP_DATA__;
const centerLat = mapData.station.lat, centerLon = mapData.station.lon;
const positions = mapData.positions, beamStats = mapData.beam_stats;
const minDistance = mapData.min_distance || 0;
const NM_TO_M = __NM_TO_M__;

function initMap() {
    const map = new google.maps.Map(document.getElementById('map'), {
        center: { lat: centerLat, lng: centerLon },
        zoom: 10,
        mapTypeControl: true,
        mapTypeControlOptions: { mapTypeIds: ['roadmap', 'satellite'] },
        mapId: 'ais_map'
    });

    new google.maps.marker.AdvancedMarkerElement({
        map,
        position: { lat: centerLat, lng: centerLon },
        title: mapData.station.name,
        content: buildDot('#FF0000')
    });

    if (minDistance > 0) {
        new google.maps.Circle({
            map,
            center: { lat: centerLat, lng: centerLon },
            radius: minDistance * NM_TO_M,
            fillColor: '#FF0000',
            fillOpacity: 0.05,
            strokeColor: '#FF0000',
            strokeOpacity: 0.3,
            strokeWeight: 1
        });
        new google.maps.marker.AdvancedMarkerElement({
            map,
            position: computeOffset(centerLat, centerLon, minDistance * NM_TO_M, 90),
            content: buildLabel(minDistance + ' nm')
        });
        const info = buildLabel('Min distance: ' + minDistance + ' nm');
        info.style.position = 'absolute';
        info.style.top = '10px';
        info.style.left = '10px';
        document.body.appendChild(info);
    }

    positions.forEach(pos => {
        new google.maps.Circle({
            map,
            center: { lat: pos.lat, lng: pos.lon },
            radius: 50,
            fillColor: '#0000FF',
            fillOpacity: 0.3,
            strokeWeight: 0
        });
    });

    if (beamStats && positions.length > 0) {
        const reach = Math.max(...positions.map(p => p.distance)) * 1.1 * NM_TO_M;
        drawBeam(map, beamStats.percentile68, reach, '#00FF00');
        drawBeam(map, beamStats.percentile95, reach, '#FFFF00');
    }
}

function buildDot(color) {
    const content = document.createElement('div');
    content.style.width = '10px';
    content.style.height = '10px';
    content.style.backgroundColor = color;
    content.style.border = '2px solid white';
    content.style.borderRadius = '50%';
    return content;
}

function buildLabel(text) {
    const content = document.createElement('div');
    content.style.backgroundColor = 'white';
    content.style.padding = '2px 4px';
    content.style.fontSize = '11px';
    content.style.border = '1px solid #ccc';
    content.textContent = text;
    return content;
}

function computeOffset(lat, lon, distance, bearing) {
    const R = 6371000;
    const brng = bearing * Math.PI / 180;
    const lat1 = lat * Math.PI / 180, lon1 = lon * Math.PI / 180;
    const lat2 = Math.asin(Math.sin(lat1) * Math.cos(distance / R) + Math.cos(lat1) * Math.sin(distance / R) * Math.cos(brng));
    const lon2 = lon1 + Math.atan2(Math.sin(brng) * Math.sin(distance / R) * Math.cos(lat1), Math.cos(distance / R) - Math.sin(lat1) * Math.sin(lat2));
    return { lat: lat2 * 180 / Math.PI, lng: lon2 * 180 / Math.PI };
}

function drawBeam(map, window, distance, color) {
    [window.min_bearing, window.max_bearing].forEach(bearing => {
        new google.maps.Polyline({
            map,
            path: [ { lat: centerLat, lng: centerLon }, computeOffset(centerLat, centerLon, distance, bearing) ],
            geodesic: true,
            strokeColor: color,
            strokeOpacity: 0.8,
            strokeWeight: 2
        });
    });
}

window.onload = function() {
    const script = document.createElement('script');
    script.src = __SCRIPT_SRC__;
    script.async = true;
    script.defer = true;
    document.head.appendChild(script);
};
</script>
<style>
html, body { height: 100%; margin: 0; padding: 0; }
#map { height: 100%; }
</style>
</head>
<body>
<div id="map"></div>
</body>
</html>
"""


def render_map_page(data: MapDataResponse, api_key: str) -> str:
    """
    Build the map page.

    Args:
        data: Station, filtered positions and beam statistics
        api_key: Google Maps JavaScript API key

    Returns:
        HTML document
    """
    script_src = GOOGLE_MAPS_SCRIPT.format(key=quote(api_key, safe=""))
    return (
        _PAGE
        .replace("__MAP_DATA__", _script_json(data.model_dump()))
        .replace("__NM_TO_M__", str(NM_TO_M))
        .replace("__SCRIPT_SRC__", _script_json(script_src))
    )
