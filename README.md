# goits

A small bookkeeping service. It keeps accounts and their balances, moves
money between accounts, records every transfer as an event with a matching
debit and credit in a journal, and can check that the journal balances.

The service is a Flask application backed by SQLAlchemy. Amounts are handled
as `decimal.Decimal` throughout; JSON numbers in request bodies are read as
decimals, not floats.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

The `goits-server` command (`goits.server:main`) reads its settings from the
environment:

| Variable      | Default    | Required |
|---------------|------------|----------|
| `DB_HOST`     | `postgres` | no       |
| `DB_PORT`     | `5432`     | no       |
| `DB_USER`     |            | yes      |
| `DB_PASSWORD` |            | yes      |
| `DB_DBNAME`   |            | yes      |
| `DB_SSLMODE`  | `disable`  | no       |
| `DB_TIMEZONE` | `UTC`      | no       |
| `SERVER_PORT` | `8080`     | no       |

`SERVER_PORT` may be given with or without a leading colon (`8080` or
`:8080`), and may carry a host (`127.0.0.1:8080`); without a host the server
listens on every interface. If a required variable is missing, or the
database cannot be reached, the server logs the problem and exits with
status 1.

```
export DB_USER=user
export DB_PASSWORD=password
export DB_DBNAME=goits
goits-server
```

On start-up the tables are created if they do not exist yet. Logs are written
to standard output as one JSON object per line, with `time`, `level`, `msg`
and any extra fields of the record.

The server connects with SQLAlchemy's `postgresql` dialect, so a PostgreSQL
driver for SQLAlchemy (psycopg2 by default) must be installed in the same
environment. It is not installed with this package. The application runs on
Flask's built-in server.

## HTTP API

### `POST /accounts`

Creates an account with a chosen ID and an initial balance. Amounts may be
JSON numbers or strings.

```json
{"account_id": 1, "initial_balance": "100.00"}
```

Answers `201 Created` with an empty body. The initial balance may not be
negative and the ID may not already be in use. A malformed body gives `400`;
a rejected account gives `500`. Errors come as `{"error": "..."}`.

### `GET /accounts/<account_id>`

Returns the account's current balance:

```json
{"account_id": 1, "balance": "100", "version": 1, "updated_at": "..."}
```

The ID must be a positive integer (`400` otherwise). An unknown account
gives `404`.

### `POST /transactions`

Moves money from one account to another.

```json
{"source_account_id": 1, "destination_account_id": 2, "amount": "25.50"}
```

Answers `201 Created`. The amount must be positive, the two accounts must
differ and both must exist, and the source must hold at least the amount;
otherwise the answer is `500` with the reason. A transfer writes one
transfer event, a debit entry for the source, a credit entry for the
destination, and raises the version of both balances by one, all inside one
database transaction.

### `GET /integrity/check`

Sums the journal's debits and credits:

```json
{"is_valid": true, "total_debits": "25.5", "total_credits": "25.5", "difference": "0"}
```

### `GET /swagger/doc.json`

Returns a Swagger 2.0 description of the account and transaction endpoints,
as built by `goits.apidocs.swagger_spec()`.

## What is not included

There is no Swagger UI: only the JSON document above is served. The package
has no command for migrations beyond creating missing tables at start-up,
and no way to list accounts, transfers or journal entries over HTTP.

## Using it as a library

The pieces can be wired together without the command, for instance against
an in-memory SQLite database:

```python
from decimal import Decimal

from goits.account_service import AccountService
from goits.database import open_database
from goits.handlers import create_app
from goits.integrity_service import IntegrityService
from goits.logger import new_logger
from goits.repositories import (
    SqlAccountBalanceRepository,
    SqlAccountRepository,
    SqlJournalRepository,
    SqlTransferEventRepository,
)
from goits.transaction_service import TransactionService

log = new_logger("info")
db = open_database(None, log, "sqlite://")

accounts = SqlAccountRepository(db.engine)
balances = SqlAccountBalanceRepository(db.engine)
events = SqlTransferEventRepository(db.engine)
journal = SqlJournalRepository(db.engine)

account_service = AccountService(accounts, balances)
transaction_service = TransactionService(accounts, balances, events, journal)
integrity_service = IntegrityService(journal)

with db.transaction() as tx:
    account_service.create_account(tx, 1, Decimal("100"))
    account_service.create_account(tx, 2, Decimal("0"))

with db.transaction() as tx:
    transaction_service.process_transfer(tx, 1, 2, Decimal("40"))

print(integrity_service.verify_double_bookkeeping().to_dict())

app = create_app(account_service, transaction_service, integrity_service, log, db)
```

`Database.transaction()` commits on success and rolls back if the block
raises. Service methods raise `goits.domain.ServiceError` when a request
breaks a rule, for example a negative initial balance or an overdrawn
transfer; the SQL repositories raise `goits.repositories.StorageError` when
the database fails. `goits.config.load_config()` raises
`goits.config.ConfigError` for a missing required variable.

The storage interfaces in `goits.repository` (`AccountRepository`,
`AccountBalanceRepository`, `TransferEventRepository`, `JournalRepository`)
can be implemented to back the services with other storage.