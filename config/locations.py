# config/locations.py
# Geografía del norte de California
# =================================

"""
Datos geográficos compartidos por eventos, clasificados y restaurantes.

- EVENT_COUNTIES: directorio condado → ciudades con slug, usado por el motor
  de eventos.
- CA_CITIES / ZIP_GEO: coordenadas para búsquedas por radio en clasificados.
- CITY_ALIASES: formas coloquiales de escribir una ciudad.
- APPROVED_COUNTIES / CITY_TO_COUNTY: filtro regional del feed en vivo.
"""

from typing import Dict, List, Tuple


# Directorio de eventos
# =====================
# El orden de declaración es el orden de los menús del sitio.

EVENT_COUNTIES: Dict[str, List[Tuple[str, str]]] = {
    "Santa Clara County": [
        ("San José", "sanjose"),
        ("Santa Clara", "santaclara"),
        ("Sunnyvale", "sunnyvale"),
        ("Mountain View", "mountainview"),
        ("Milpitas", "milpitas"),
        ("Cupertino", "cupertino"),
        ("Palo Alto", "paloalto"),
        ("Campbell", "campbell"),
        ("Los Gatos", "losgatos"),
        ("Morgan Hill", "morganhill"),
        ("Gilroy", "gilroy"),
    ],
    "San Mateo County": [
        ("Redwood City", "redwoodcity"),
        ("San Mateo", "sanmateo"),
        ("Burlingame", "burlingame"),
        ("Daly City", "dalycity"),
        ("South San Francisco", "ssf"),
    ],
    "Alameda County": [
        ("Oakland", "oakland"),
        ("Fremont", "fremont"),
        ("Hayward", "hayward"),
        ("Berkeley", "berkeley"),
        ("Alameda", "alameda"),
        ("Pleasanton", "pleasanton"),
        ("Livermore", "livermore"),
        ("Dublin", "dublin"),
    ],
    "Santa Cruz County": [
        ("Santa Cruz", "santacruz"),
        ("Watsonville", "watsonville"),
    ],
    "Monterey County": [
        ("Monterey", "monterey"),
        ("Salinas", "salinas"),
        ("Marina", "marina"),
        ("Seaside", "seaside"),
        ("Carmel", "carmel"),
        ("Pacific Grove", "pacificgrove"),
    ],
    "San Benito County": [("Hollister", "hollister")],
    "Stanislaus County": [("Modesto", "modesto"), ("Turlock", "turlock")],
    "San Joaquin County": [
        ("Stockton", "stockton"),
        ("Lodi", "lodi"),
        ("Tracy", "tracy"),
        ("Manteca", "manteca"),
    ],
    "Merced County": [
        ("Merced", "merced"),
        ("Atwater", "atwater"),
        ("Los Baños", "losbanos"),
    ],
    "Madera County": [("Madera", "madera")],
    "Fresno County": [("Fresno", "fresno")],
}

# Coordenadas de ciudades (clasificados)
# ======================================

CA_CITIES: Dict[str, Dict[str, object]] = {
    "San José": {"county": "Santa Clara", "lat": 37.338207, "lng": -121.88633},
    "Santa Clara": {"county": "Santa Clara", "lat": 37.354108, "lng": -121.955236},
    "Sunnyvale": {"county": "Santa Clara", "lat": 37.36883, "lng": -122.03635},
    "Cupertino": {"county": "Santa Clara", "lat": 37.322997, "lng": -122.032182},
    "Campbell": {"county": "Santa Clara", "lat": 37.287166, "lng": -121.949956},
    "Milpitas": {"county": "Santa Clara", "lat": 37.432334, "lng": -121.899574},
    "Los Gatos": {"county": "Santa Clara", "lat": 37.235808, "lng": -121.962375},
    "Monte Sereno": {"county": "Santa Clara", "lat": 37.236944, "lng": -121.9925},
    "Saratoga": {"county": "Santa Clara", "lat": 37.263832, "lng": -122.023015},
    "Mountain View": {"county": "Santa Clara", "lat": 37.386052, "lng": -122.083851},
    "Los Altos": {"county": "Santa Clara", "lat": 37.385218, "lng": -122.11413},
    "Palo Alto": {"county": "Santa Clara", "lat": 37.441883, "lng": -122.143019},
    "Fremont": {"county": "Alameda", "lat": 37.54827, "lng": -121.988571},
    "Newark": {"county": "Alameda", "lat": 37.529659, "lng": -122.040238},
    "Union City": {"county": "Alameda", "lat": 37.593391, "lng": -122.043829},
    "Hayward": {"county": "Alameda", "lat": 37.668821, "lng": -122.080796},
    "Redwood City": {"county": "San Mateo", "lat": 37.485215, "lng": -122.236355},
    "San Mateo": {"county": "San Mateo", "lat": 37.562991, "lng": -122.325525},
    "Daly City": {"county": "San Mateo", "lat": 37.687925, "lng": -122.470207},
    "Walnut Creek": {"county": "Contra Costa", "lat": 37.910078, "lng": -122.065181},
    "Concord": {"county": "Contra Costa", "lat": 37.977978, "lng": -122.031074},
}

# Alias normalizados (minúsculas, sin acentos) → nombre canónico.
CITY_ALIASES: Dict[str, str] = {
    "san jose": "San José",
    "sanjose": "San José",
    "sj": "San José",
    "san jose ca": "San José",
    "los gatos": "Los Gatos",
    "losgatos": "Los Gatos",
    "mountain view": "Mountain View",
    "mountainview": "Mountain View",
    "santa clara": "Santa Clara",
    "santaclara": "Santa Clara",
    "milpitas": "Milpitas",
    "campbell": "Campbell",
    "sunnyvale": "Sunnyvale",
    "cupertino": "Cupertino",
    "saratoga": "Saratoga",
    "los altos": "Los Altos",
    "palo alto": "Palo Alto",
    "paloalto": "Palo Alto",
}

ZIP_GEO: Dict[str, Tuple[float, float]] = {
    "95110": (37.3483, -121.9147),
    "95111": (37.2842, -121.8247),
    "95112": (37.3447, -121.8846),
    "95113": (37.3357, -121.8907),
    "95116": (37.3503, -121.8504),
    "95117": (37.3122, -121.9627),
    "95118": (37.2562, -121.8894),
    "95119": (37.2282, -121.7887),
    "95120": (37.1992, -121.8354),
    "95121": (37.302, -121.8096),
    "95122": (37.3297, -121.8336),
    "95123": (37.2459, -121.8331),
    "95124": (37.2558, -121.9225),
    "95125": (37.2943, -121.8924),
    "95126": (37.3259, -121.9168),
    "95127": (37.371, -121.7922),
    "95128": (37.3174, -121.9356),
    "95129": (37.3055, -122.0024),
    "95130": (37.2864, -121.9767),
    "95131": (37.3883, -121.889),
    "95132": (37.4184, -121.8529),
    "95133": (37.3715, -121.8602),
    "95134": (37.4313, -121.9447),
    "95135": (37.3008, -121.7592),
    "95136": (37.2702, -121.849),
    "95138": (37.2477, -121.7452),
    "95139": (37.2264, -121.7664),
    "95140": (37.3321, -121.889),
    "95050": (37.3513, -121.9528),
    "95051": (37.3491, -121.9842),
    "95054": (37.3926, -121.9516),
    "94085": (37.3897, -122.017),
    "94086": (37.3714, -122.0231),
    "94087": (37.3529, -122.036),
    "94089": (37.4068, -122.0081),
    "95014": (37.3161, -122.0462),
    "94040": (37.3861, -122.0839),
    "94041": (37.3893, -122.0819),
    "94043": (37.4192, -122.0574),
}

# Feed en vivo
# ============

APPROVED_COUNTIES = frozenset(
    {
        "Santa Clara",
        "San Benito",
        "Santa Cruz",
        "Monterey",
        "Alameda",
        "San Mateo",
        "San Francisco",
        "Contra Costa",
        "Marin",
        "Napa",
        "Sonoma",
        "Stanislaus",
        "San Joaquin",
        "Merced",
        "Fresno",
        "Madera",
    }
)

_COUNTY_CITIES = {
    "Santa Clara": (
        "San Jose", "Santa Clara", "Sunnyvale", "Milpitas", "Mountain View",
        "Los Gatos", "Campbell", "Cupertino", "Saratoga", "Gilroy", "Morgan Hill",
    ),
    "San Benito": ("Hollister",),
    "Santa Cruz": ("Santa Cruz", "Watsonville", "Capitola"),
    "Monterey": ("Salinas", "Monterey", "Seaside", "Marina"),
    "Alameda": ("Fremont", "Hayward", "Oakland", "Berkeley", "Union City"),
    "San Mateo": ("Redwood City", "San Mateo", "Palo Alto"),
    "San Francisco": ("San Francisco",),
    "Stanislaus": ("Modesto", "Ceres", "Turlock"),
    "San Joaquin": ("Stockton", "Manteca", "Lodi", "Tracy"),
    "Merced": ("Merced",),
    "Fresno": ("Fresno", "Clovis"),
}

CITY_TO_COUNTY: Dict[str, str] = {
    city: county for county, cities in _COUNTY_CITIES.items() for city in cities
}
