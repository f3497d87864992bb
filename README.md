# teeverifier

Tools for reading attestation evidence from trusted execution environments
(TEEs) and turning it into flat, JSON-compatible claims.

## What it does

- `teeverifier.sgx_quote.parse_sgx_quote` parses the fixed 436-byte leading
  part of an SGX quote into an `SgxQuote` (header, report body and signature
  length). `teeverifier.sgx_claims.generate_parsed_claims` turns it into a
  claims dict with hex-encoded fields.
- `teeverifier.tdx_quote.parse_tdx_quote` parses version 4 and version 5 TD
  quotes (TDX 1.0 and TDX 1.5 bodies) into a `Quote`.
  `teeverifier.tdx_claims.generate_parsed_claim` builds claims from a quote
  and an optional `CcEventLog`.
- `teeverifier.eventlog.CcEventLog` holds `EventEntry` records. It replays
  them into RTMR values (`rebuild_rtmr`), compares them with values from a
  quote (`integrity_check`), and looks up events for a `MeasuredEntity`
  (`query_digest`, `query_event_data`).
- `teeverifier.kernel_params` decodes TD-Shim platform config info
  (`TdShimPlatformConfigInfo.from_bytes`) and splits a kernel command line
  into a dict (`parse_kernel_parameters`).
- `teeverifier.sample.SampleVerifier` checks JSON sample evidence whose
  report data and init data are base64 strings.
- `teeverifier.base.regularize_data` pads with NUL bytes, or truncates, an
  expected value to the width of the field it is compared with.

Every failure raises `teeverifier.base.VerifierError`.

## Installation

```
pip install teeverifier
```

## Usage

```python
import base64
import json

from teeverifier.base import Tee
from teeverifier.registry import to_verifier

evidence = json.dumps({
    "svn": "1",
    "report_data": base64.b64encode(b"nonce").decode(),
}).encode()

verifier = to_verifier(Tee.SAMPLE)
claims = verifier.evaluate(evidence, b"nonce", None)
print(claims)  # {'svn': '1', 'report_data': 'bm9uY2U=', 'init_data': ''}
```

Pass `None` for the expected report data or init data hash to skip that
check.

Parsing a TDX quote read from a file:

```python
from teeverifier.tdx_quote import parse_tdx_quote
from teeverifier.tdx_claims import generate_parsed_claim

with open("quote.dat", "rb") as fh:
    quote = parse_tdx_quote(fh.read())

claims = generate_parsed_claim(quote, None)
print(claims["report_data"])
```

## What it does not do

- It does not check the cryptographic signatures of SGX or TDX quotes; the
  quote parsers only read the fields.
- `to_verifier` returns a verifier only for `Tee.SAMPLE`. For every other
  `Tee` it raises `VerifierError`.
- `CcEventLog` is not read from a raw event log table; build it from
  `EventEntry` records yourself.
- There is no command-line tool or server.

## Running the tests

```
pip install -e ".[test]"
pytest
```