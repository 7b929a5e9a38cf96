import logging
import os

from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from freivalds_routes import freivalds_bp, init_freivalds_bp

DB_PATH = os.environ.get("FREIVALDS_DB_PATH")

if DB_PATH:
    DB = TinyDB(DB_PATH)                    #Storage DB
else:
    DB = TinyDB(storage=MemoryStorage)      #Memory DB

app = Flask(__name__)

freivalds_db = DB.table("freivalds")
init_freivalds_bp(freivalds_db)
app.register_blueprint(freivalds_bp)


@app.route("/")
def main():
    return jsonify({
        "name": "zkmatmul",
        "endpoints": [
            "GET /freivalds/circuit",
            "POST /freivalds/build",
            "POST /freivalds/check",
            "POST /freivalds/load-example",
            "POST /freivalds/reset",
        ],
    })


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(debug=True)
