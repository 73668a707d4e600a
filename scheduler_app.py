import sqlalchemy as sa
import sqlalchemy.orm as so
from scheduler import create_app, db
from scheduler.models import Account, AccountRole, Event
import os

app = create_app(os.getenv('FLASK_CONFIG') or 'development')

@app.shell_context_processor
def make_shell_context():
    return {
        'sa': sa,
        'so': so,
        'db': db,
        'Account': Account,
        'AccountRole': AccountRole,
        'Event': Event,
    }

if __name__ == '__main__':
    app.run(debug=True)
