from concurrent.futures import ThreadPoolExecutor
from typing import List, Any

class Executor:

    def __init__(self, max_workers: int = 1):
        self.max_workers = max(1, max_workers)

    def run_steps(self, steps: List[Any]) -> List[Any]:
        if self.max_workers > 1 and len(steps) > 1:
            # map() yields in submission order
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                return list(pool.map(self._run, steps))

        results = []
        for step in steps:
            results.append(self._run(step))
        return results

    @staticmethod
    def _run(step: Any) -> Any:
        if hasattr(step, 'execute'):
            return step.execute()
        return step()
