# stashtrade

A library for working with the Path of Exile public stash tab stream:

- validating change ids and decoding stash tab responses,
- reading trade prices out of item notes,
- turning successive snapshots of stashes into item events
  (added, removed, changed),
- sending stashes to object storage (gzip-compressed JSON lines),
  RabbitMQ or a PostgreSQL offer table,
- an ASGI application for searching stored trade offers.

Install with `pip install .`, or `pip install .[test]` to run the tests.

## Reading prices from item notes

```python
from stashtrade.note_parser import PriceParser

parser = PriceParser()
price = parser.parse_price("~b/o 12/19 chaos")
print(price.item, price.ratio)   # chaos 0.6315...

parser.is_price("~price 1/0 chaos")      # True: it has the shape of a price
parser.parse_price("~price 1/0 chaos")   # None: a zero in a ratio is refused
```

A note must start with `~b/o` or `~price`, followed by a number or a ratio
such as `1/5`, and then the name of the item asked for. `parse_price`
returns a `Price` with `ratio` and `item`, or `None`.

## Change ids

```python
from stashtrade.change_id import parse_change_id, parse_change_id_from_bytes

change_id = parse_change_id("850662131-863318628-825558626-931433265-890834941")
print(change_id)

head = b'{"next_change_id": "1882903321-1878868410-1818903289-2014357625-1957236232", "stashes": []}'
print(parse_change_id_from_bytes(head))
```

A change id is a dash-separated list of unsigned 32-bit integers; anything
else raises `InvalidChangeIdError`, a `ValueError`.
`parse_change_id_from_bytes` reads the fourth quote-delimited field of a
response body, so it works on the first bytes of a response.

`stashtrade.poe_ninja.fetch_latest_change_id()` asks poe.ninja for the
newest change id of the stream.

## Stash data

`stashtrade.stash.parse_stash_tab_response(raw)` decodes a response body
into a `StashTabResponse` holding `next_change_id` and a list of
`StashInternal` records with their `Item`s. Malformed data raises
`StashFormatError`. `Stash` is a stash record stamped with `created_at`,
`change_id` and `next_change_id`; `Stash.to_json()` gives its JSON form.

## Leagues and asset names

```python
from stashtrade.league import League

League("Hardcore Mercenaries").is_hc()   # True
League("Mercenaries").is_hc()            # False
```

`stashtrade.assets.AssetIndex` maps short asset ids (such as `chaos`) to
their full names. `init()` downloads the static trade data;
`load(response)` fills the index from an already decoded response;
`get_name(asset_id)` looks a name up.

## Diffing stashes

`stashtrade.diffstore.StashStore` keeps the last seen snapshot of every
public stash. `StashStore.ingest(stashes, next_change_id)` records a chunk of
`Stash` records and returns the events it causes, built by
`stashtrade.differ.diff_stash`:

- `Added` for an item that appeared,
- `Removed` for an item that is gone,
- `Changed` for an item whose note or stack size changed.

Stashes that turn private are dropped from the store. Each event has a
`to_json()` form tagged with its `type`.

`stashtrade.event_sink.DiffS3Sink` buffers events per league. When a chunk
arrives whose timestamp falls in a later minute than the last sync, and on
`flush()`, it uploads one `<league>/<YYYY/MM/DD/HH/MM>.json.gz` object per
league (storage class `ONEZONE_IA`). Failed uploads are logged and kept for
the next sync.

## Resuming

```python
from stashtrade.resumption import State, StateWrapper

state = StateWrapper.load_from_file("indexer_state.json")
state.update(State(change_id="1-2-3-4-5", next_change_id="6-7-8-9-10"))
state.save()
```

A missing file gives a wrapper with no state; an unreadable one raises
`ResumptionError`.

## Sinks

The stash sinks in `stashtrade.sinks` share the `stashtrade.sinks.base.Sink`
interface: `handle(payload)` for each chunk of stashes, returning how many
it handled, and `flush()` on shutdown. Used as a context manager, a sink is
flushed when the block is left.

- `stashtrade.sinks.s3.S3Sink(uploader, bucket)` buffers stashes per league
  and uploads them as `<league>/<YYYY/MM/DD/HH/MM>.json.gz` when a chunk
  starts a new minute, and on `flush()`. Stashes without a league are not
  buffered.
- `stashtrade.sinks.rabbitmq.RabbitMqSink` publishes every chunk as one JSON
  array to the `amq.fanout` exchange. `RabbitMqSink.connect(config)` opens
  the connection from a `RabbitMqConfig(connection_url, producer_routing_key)`;
  the routing key defaults to `poe-stash-indexer`.
- `stashtrade.sinks.postgres.PostgresSink(connection, asset_index)` turns
  priced items into offers (see `map_stash_to_offers`), deletes the previous
  offers of the incoming stashes and inserts the new ones. `handle` always
  writes to the table `challenge`; `ingest(league, stashes)` writes to the
  table named after the given league.

The object-storage uploader is any object with
`put_object(*, bucket, key, body, storage_class=None)` that raises on
failure (see `stashtrade.archive.Uploader`); `stashtrade.archive` also has
`time_bucket` and `compress_jsonl`.

## Trade API

`stashtrade.tradeapi.api.create_app(store, metrics)` builds a Starlette
application with two routes:

- `GET /healthcheck` answers `Ok`.
- `POST /trade` takes a JSON body with `league` and optionally `sell`,
  `buy`, `seller_account`, `stash_id` and `limit`, and answers with
  `{"count": ..., "offers": [...]}`. A missing league or a failed query
  answers 404; a body that is not JSON answers 415 or 400, and fields of the
  wrong type answer 422.

`stashtrade.tradeapi.store.Store(connection, asset_index)` runs the search
on a DB-API connection. Results are ordered newest first; `limit` defaults
to 50 and is capped at 200. `sell` and `buy` are expanded to full names
through the `AssetIndex` before querying. `Store.build_query` returns the
SQL and parameters without running them.

`stashtrade.tradeapi.metrics.ApiMetricStore` counts search requests;
`render()` gives the Prometheus text format and `serve(port)` exposes it at
`/metrics` from a background thread.

`stashtrade.tradeapi.config.Config.from_env()` reads `METRICS_PORT` and
`TRADE_API_DATABASE_URL`, raising `ConfigError` when one is missing or the
port is not an unsigned 32-bit integer.

## What the package does not do

- It does not follow the public stash stream itself: there is no loop that
  requests stash pages, handles rate limits or OAuth, and feeds the sinks.
- It has no command-line programs. The trade API is an application object
  for an ASGI server of your choice; nothing here starts one.
- It ships no S3 client and no PostgreSQL driver: you pass in an uploader
  and a DB-API connection. It does not create the offer tables.