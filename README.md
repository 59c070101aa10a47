# usersales

Two small HTTP services that keep their data in memory: one manages users,
the other records sales made by those users. Both are Flask applications.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the users service

```
usersales
```

This starts the users service with Flask's built-in server, bound to
`0.0.0.0` on port 8080. Both can be changed:

```
usersales --host 127.0.0.1 --port 9000
```

If the server cannot bind its address, the command fails with
`error trying to start server: ...`.

## Users API

| Method | Path          | Result                                                           |
|--------|---------------|------------------------------------------------------------------|
| POST   | `/users`      | 201 with the new user; 500 if the input is rejected              |
| GET    | `/users/<id>` | 200 with the user; 404 if unknown or deleted                     |
| PATCH  | `/users/<id>` | 200 with the updated user; 404 if unknown; 500 if rejected       |
| DELETE | `/users/<id>` | 204; the user is marked `deleted`, not removed                   |
| GET    | `/ping`       | 200 `{"message": "pong"}`                                        |

A user is created from a JSON body with `name`, `address` and an optional
`nickname`. The name and nickname may hold ASCII letters only, and name and
address must not be empty. A new user gets an `id`, `created_at`,
`updated_at`, `version` 1 and status `active`. Every update or delete raises
the version by one. A PATCH must change at least one field; a PATCH with no
fields, or with a name or nickname that is not letters only, is answered
with 500 and the error message.

A body that is empty, is not valid JSON, is not a JSON object, or has a
known field of the wrong type is answered with 400. Unknown keys are
ignored and `null` values count as absent.

Errors are returned as `{"error": "<message>"}`.

```
curl -X POST localhost:8080/users \
     -d '{"name": "Ayrton", "address": "Pringles", "nickname": "Chiche"}'
```

## Sales API

| Method | Path                              | Result                                       |
|--------|-----------------------------------|----------------------------------------------|
| POST   | `/sales`                          | 201 with the new sale                        |
| GET    | `/sales?user_id=<id>&status=<s>`  | 200 with a report of that user's sales       |
| PATCH  | `/sales/<id>`                     | 200 with the updated sale                    |
| GET    | `/ping`                           | 200 `{"message": "pong"}`                    |

A sale is created from `user_id` and a positive `amount`. An unknown or
deleted user gives 400; an amount that is not positive gives 500. The sale
is given a status picked at random from `pending`, `approved` and
`rejected`.

The report holds the matching sales under `results` and a `metadata` block
with `quantity`, `approved`, `rejected`, `pending` and `total_amount`. The
optional `status` filter must be one of the three statuses (otherwise 400).
While no sale at all has been recorded, the report request is answered with
500 and `sale not found`.

Only a `pending` sale can be changed, and only to `approved` or `rejected`:
any other target status gives 400, and changing a sale that is no longer
pending gives 409. An unknown sale gives 404.

## Using the services from Python

The storage, service and application layers are importable on their own:

- `usersales.users`: `User`, `UserUpdate`, `UserStatus`, `UserStorage` and
  `UserService` (`create`, `get`, `update`, `delete`).
- `usersales.sales`: `Sale`, `SaleUpdate`, `SaleStatus`, `SaleStorage`,
  `SaleService` (`create`, `get`, `report`, `update`) and the `SaleReport` /
  `SaleSummary` report types. `SaleService` takes the `UserService` whose
  users it checks, and accepts a `random.Random` to make the status choice
  repeatable.
- `usersales.errors`: the exceptions the services raise, all derived from
  `ServiceError` (`NotFoundError`, `SaleNotFoundError`, `EmptyIDError`,
  `InvalidInputError`, `NoFieldsToUpdateError`, `TransactionInvalidError`).

`usersales.api.create_users_app(user_service)` and
`usersales.api.create_sales_app(sale_service, user_service)` build the Flask
applications around existing services, so both can share one set of users
and be served by any WSGI server.

```python
from usersales.api import create_sales_app, create_users_app
from usersales.sales import SaleService
from usersales.users import UserService

users = UserService()
users_app = create_users_app(users)
sales_app = create_sales_app(SaleService(users), users)
```

## What it does not do

- Nothing is persisted: users and sales live in memory and are lost when
  the process ends.
- There is no command for the sales service; build it with
  `create_sales_app` and serve it with a WSGI server of your choice.
- The two applications do not talk to each other over HTTP; they share
  users only when given the same `UserService` in one process.