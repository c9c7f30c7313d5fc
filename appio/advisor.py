# ================================
# file: appio/advisor.py
# ================================
from __future__ import annotations
from typing import Callable, Dict, Optional
import json, os
import http.client
import urllib.request

from core.config import (
    ADVISOR_MODEL, ADVISOR_ENDPOINT, ADVISOR_API_KEY_ENV,
    ADVISOR_TIMEOUT_S, ADVISOR_THINKING_BUDGET,
)

SYSTEM_INSTRUCTION = """
You are a senior 3D vision engineer and robotics expert.
Your specialty is hand-eye calibration, point cloud stitching, and 5-axis CNC kinematics.
The user is an engineer asking for implementation details on mounting an RGB-D camera to a 5-axis laser head.

When answering:
1. Be highly technical but clear.
2. Use mathematical notation for transformations (e.g., T_base_tool).
3. Suggest specific algorithms (e.g., Tsai-Lenz for calibration, ICP for refinement).
4. Address the specific workflow: Calibration -> Trajectory -> Stitching.
"""

Transport = Callable[[str, Dict, float], Dict]


def _http_post_json(url: str, payload: Dict, timeout: float) -> Dict:
    req = urllib.request.Request(url, data=json.dumps(payload).encode("utf-8"),
                                 headers={"Content-Type": "application/json"}, method="POST")
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return json.loads(resp.read().decode("utf-8"))


class AdvisoryClient:
    """Text-in/text-out advisory service (hosted LLM).
    Fully decoupled from the simulation: every failure is returned as a
    user-visible "Error: ..." string instead of being raised.
    """
    def __init__(self, api_key: Optional[str] = None, model: str = ADVISOR_MODEL,
                 transport: Optional[Transport] = None, timeout: float = ADVISOR_TIMEOUT_S) -> None:
        self.api_key = api_key
        self.model = model
        self.transport = transport or _http_post_json
        self.timeout = float(timeout)

    def _resolve_key(self) -> str:
        if self.api_key:
            return self.api_key
        for name in ADVISOR_API_KEY_ENV:
            val = os.environ.get(name)
            if val:
                self.api_key = val
                return val
        raise RuntimeError("API Key is missing. Please check your environment configuration.")

    def _payload(self, prompt: str) -> Dict:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"thinkingConfig": {"thinkingBudget": ADVISOR_THINKING_BUDGET}},
        }

    @staticmethod
    def _extract_text(response: Dict) -> str:
        parts = []
        for cand in response.get("candidates", []) or []:
            for part in (cand.get("content") or {}).get("parts", []) or []:
                if part.get("text"):
                    parts.append(part["text"])
            if parts:
                break
        return "".join(parts)

    def ask(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            return ""
        try:
            key = self._resolve_key()
            url = ADVISOR_ENDPOINT.format(model=self.model) + f"?key={key}"
            response = self.transport(url, self._payload(prompt), self.timeout)
            return self._extract_text(response) or "No response generated."
        except (RuntimeError, OSError, http.client.HTTPException,
                ValueError, KeyError, TypeError, AttributeError) as e:
            # URLError and socket timeouts are OSError; malformed replies are HTTPException
            print(f"[ADVISOR] request failed: {e}")
            return f"Error: {e}. Please check your API Key settings."
