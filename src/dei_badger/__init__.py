"""DEI Badger - awards a bronze badge to repositories that publish a DEI.md file.

Scans a user's public GitHub and GitLab repositories for the tracked file and
issues a badge the first time the file appears or whenever it changes.

Components:
- main_api: FastAPI routes (OAuth authorize/callback, scan)
- providers: GitHub and GitLab REST adapters
- pipeline: repository scan and badge decision
- store: SQLite badge records
- badges: bronze badge issuance
- notify: SMTP mailer
"""
