from locust import HttpUser, task, between
import random


class Shopper(HttpUser):
    wait_time = between(0.1, 0.5)

    def on_start(self):
        # Register a shopper for this simulated client
        uname = f"user_{random.randint(1, 1_000_000)}"
        r = self.client.post(
            "/api/register",
            json={"username": uname, "password": "loadtest", "email": f"{uname}@example.com"},
        )
        if r.status_code == 201:
            self.headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
        else:
            self.headers = None
        r = self.client.get("/api/products")
        self.product_ids = [p["id"] for p in r.json()] if r.status_code == 200 else []

    @task(5)
    def browse(self):
        self.client.get("/api/products")
        if self.product_ids:
            self.client.get(f"/api/products/{random.choice(self.product_ids)}", name="/api/products/[id]")

    @task(2)
    def search(self):
        self.client.get("/api/products/search", params={"q": random.choice(["wireless", "nike", "chair", "pro"])})

    @task(1)
    def place_order(self):
        if not self.headers or not self.product_ids:
            return
        items = [
            {"product_id": pid, "quantity": random.randint(1, 3)}
            for pid in random.sample(self.product_ids, k=min(2, len(self.product_ids)))
        ]
        self.client.post("/api/orders", json={"items": items}, headers=self.headers)
        self.client.get("/api/user/orders", headers=self.headers)
