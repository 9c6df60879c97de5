# storefront/cli.py
import click
from werkzeug.security import generate_password_hash
from .extensions import db
from .model import User

@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--password", required=True)
@click.option("--mobile", required=True)
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
def create_admin(email, password, mobile, first_name, last_name):
    email = email.strip().lower()
    if User.query.filter((User.email == email) | (User.mobile == mobile)).first():
        click.echo("Email or mobile already exists"); return
    u = User(
        email=email, mobile=mobile, first_name=first_name, last_name=last_name,
        password_hash=generate_password_hash(password), role="admin",
    )
    db.session.add(u); db.session.commit()
    click.echo(f"Admin created: {u.id} {u.email}")

def register_cli(app):
    app.cli.add_command(create_admin)
