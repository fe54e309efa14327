from relay.cli.main import app

app()
