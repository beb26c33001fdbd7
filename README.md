# offair

A terminal companion for OnAir companies. It keeps a local SQLite database
of airports, records where the company runs FBOs, and analyses the FBO
network: distances between bases, clusters of nearby FBOs, promising
airports for the next FBO, and FBOs that add little to the network.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

```
offair
offair --db path/to/other.db
```

Without `--db` the database is `~/.offair/offair.db`. It and its directory
are created on first start. A `.env` file in the working directory is
loaded into the environment at start-up.

Menus are answered by typing an option's number or its exact text. Free
text prompts take a blank answer as "go back" (or as the value shown in
brackets, where one is shown). End of input or Ctrl-C leaves the program.

The main menu:

- **Airports**
  - *Airport Lookup*: look up an airport by ICAO code. A three-letter code
    is taken as Australian and prefixed with `Y`. If the airport has no
    airport type yet, you are asked for one (Aerodrome `AD`, Aircraft
    Landing Area `ALA`, or Skip).
  - *Modify Airport*: edit an airport's country code, state, country name,
    city and airport type. Blank answers clear state, country name and
    city; a blank country code leaves it unchanged.
- **FBOs**
  - *List Airports with FBOs*: pick an airport to remove its FBO, or choose
    *Add FBO* to open one. An FBO can only be opened at an airport that has
    coordinates and no FBO yet; it is named "&lt;airport name&gt; FBO".
  - *List Distances Between FBOs*: totals, average, shortest and longest
    connection, the five closest and five furthest pairs, and clusters of
    FBOs within 300 nm.
  - *Find Distance Between Airports*: great-circle distance in nautical
    miles between two stored airports.
  - *Find Optimal FBO Locations*: the ten best-scoring airports for a new
    FBO, each with up to five existing FBOs it would connect to well.
  - *[PRESENTLY BROKEN] Find Redundant FBOs*: listed but does nothing when
    chosen; the analysis is available from Python (see below).
  - *Sync FBOs*: bring the local FBO table in line with the company's FBOs
    on OnAir.
- **Exit**

## Configuration

| Variable | Default | Meaning |
| --- | --- | --- |
| `ONAIR_COMPANY_ID` | none | Company identifier; *Sync FBOs* stops with an error without it. |
| `FBO_NM_OPTIMAL` | `800` | Ideal distance in nm between FBOs. Connections within 20 % of it count as optimal. |
| `FBO_NM_MAX` | `1200` | Maximum distance in nm; shown in the reports. |
| `FBO_REQ_LIGHTS` | `true` | Only the exact value `true` requires lit airports; otherwise unlit airports are allowed but scored 10 points lower. |
| `FBO_PREFERRED_SIZE` | unset | Preferred airport size, an integer 0 to 5; other values are ignored. |
| `FBO_REDUNDANCY_THRESHOLD` | `100.0` | Only FBOs with a redundancy score above this are suggested for removal. |

Numbers that cannot be parsed are read as 0. `offair.settings.load_settings`
returns these as an `FBOSettings` record.

## What it does not do

The package contains no OnAir API client. In the `offair` command every
step that needs one reports `no OnAir API client is configured`: looking up
or modifying an airport that is not already in the database, adding an FBO
at an unknown airport, and *Sync FBOs*. Airports therefore have to be in
the database already, for example written with `offair.database.save_airport`.

The menu functions take an `api_factory` argument, a callable returning a
client, so a client can be supplied from Python. It needs:

- `get_airport(icao)` returning a mapping with keys such as `id`, `name`,
  `icao`, `country_code`, `latitude`, `longitude`, `size`, `has_lights`;
- `get_company_fbos(company_id)` returning mappings with `airport_id`,
  `name` and a nested `airport` mapping holding `icao`, `latitude` and
  `longitude`.

## Use from Python

```python
from offair.database import init_db, save_airport
from offair.models import Airport
from offair.fbo_ops import add_fbo
from offair.distances import list_distances_between_fbos
from offair.redundant import find_redundant_fbos

conn = init_db("network.db")
save_airport(conn, Airport(id="1", name="Sydney", icao="YSSY", country_code="AU",
                           latitude=-33.95, longitude=151.18, has_lights=True))
save_airport(conn, Airport(id="2", name="Perth", icao="YPPH", country_code="AU",
                           latitude=-31.94, longitude=115.97, has_lights=True))
add_fbo(conn, "YSSY")
add_fbo(conn, "YPPH")

print(list_distances_between_fbos(conn))
print(find_redundant_fbos(conn, 800.0, 1200.0, True, None, 100.0))
```

Other useful pieces:

- `offair.network.calculate_distance(lat1, lon1, lat2, lon2)`: haversine
  distance in nm (Earth radius 3440 nm).
- `offair.network.calculate_network_metrics` and
  `calculate_redundancy_score`: average spacing, efficiency score and the
  0–100 redundancy score.
- `offair.optimal.find_optimal_fbo_locations` and `score_candidate`.
- `offair.redundant.select_redundant_fbos`: the removal selection on its
  own, skipping FBOs within 10 nm of one already chosen.
- `offair.distances.find_clusters(fbos, radius)`.
- `offair.sync.sync_fbos(conn, api_fbos, echo)`: returns a `SyncReport`
  with `added`, `updated`, `unchanged`, `removed` and `total`.
- `offair.fbo_ops.add_fbo`, `remove_fbo` and `list_airports_with_fbos`;
  failures raise `FBOError`, unknown ICAO codes `AirportNotFoundError`.

Reports are returned as strings with terminal colour codes.