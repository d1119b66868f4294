from skillhub.apps.cli.app import app

app(prog_name="skillhub")
