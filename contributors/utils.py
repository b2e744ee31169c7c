import os
import json
import yaml
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler
from jsonschema import validate, Draft202012Validator
from jsonschema.exceptions import ValidationError
from typing import Any, Dict, List

# ---------- Config validation ----------

def load_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def load_yaml(path: str) -> Any:
    return yaml.safe_load(load_file(path))

def validate_config(cfg: dict):
    here = os.path.dirname(os.path.abspath(__file__))
    schema_path = os.path.join(here, "schemas", "config.schema.json")
    schema = json.loads(load_file(schema_path))
    try:
        validate(instance=cfg, schema=schema, cls=Draft202012Validator)
    except ValidationError as e:
        raise ValueError(f"Config validation error: {e.message} at {list(e.path)}") from e

# ---------- Output writer ----------

def write_output(result: Dict[str, Any], out_cfg: dict) -> List[str]:
    """Write a run result to ``out_cfg["dir"]`` in each requested format.

    ``result`` carries ``stash`` (indexed stash keys), ``metadata`` and
    ``contributors``. Returns the paths written, in format order.
    """
    out_dir = out_cfg["dir"]
    formats = out_cfg.get("formats") or ["json"]
    os.makedirs(out_dir, exist_ok=True)
    now_local = dt.datetime.now().astimezone()
    ts = now_local.strftime("%Y%m%dT%H%M%S%z")
    base = os.path.join(out_dir, f"contributors_{ts}")

    document = {"stash": result.get("stash", {}), "metadata": result.get("metadata", {})}
    generated_files = []

    if "json" in formats:
        json_path = base + ".json"
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(document, f, ensure_ascii=False, indent=2)
        generated_files.append(json_path)

    if "yaml" in formats:
        yaml_path = base + ".yaml"
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(document, f, allow_unicode=True, sort_keys=False)
        generated_files.append(yaml_path)

    if "txt" in formats:
        txt_path = base + ".txt"
        with open(txt_path, "w", encoding="utf-8") as f:
            f.writelines(f"{c}\n" for c in result.get("contributors", []))
        generated_files.append(txt_path)

    return generated_files

# ---------- Logging ----------

_LOGGER_INITIALIZED = False

class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    # Empty LOG_DIR keeps build hooks from writing into the source tree
    log_dir = os.getenv("LOG_DIR", "logs")
    json_mode = os.getenv("LOG_JSON", "false").lower() == "true"

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level, logging.INFO))
    fmt = JsonFormatter() if json_mode else logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(TimedRotatingFileHandler(
            os.path.join(log_dir, "git-contributors.log"), when="D", backupCount=7, encoding="utf-8",
        ))
    for h in handlers:
        h.setLevel(logger.level)
        h.setFormatter(fmt)
        logger.addHandler(h)

    _LOGGER_INITIALIZED = True

def get_logger(name: str = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)
