import copy
import unittest
import torch
from neuralscalar.nn.network import (
    Activation,
    Initialization,
    NetworkSpecification,
    TinyNeuralNetwork,
)


class TestNetworkSpecification(unittest.TestCase):

    def test_dimensions(self):
        spec = NetworkSpecification(3)
        self.assertEqual(spec.input_dim(), 3)
        self.assertEqual(spec.output_dim(), 0)
        self.assertEqual(spec.num_layers(), 0)

        spec.add_linear_layer(Activation.TANH, 4)
        spec.add_linear_layer('identity', 1, learn_bias=False)
        self.assertEqual(spec.output_dim(), 1)
        self.assertEqual(spec.num_layers(), 2)
        self.assertEqual(spec.num_weights(), 3 * 4 + 4 * 1)
        # input bias + first layer bias, the output layer has none
        self.assertEqual(spec.num_biases(), 3 + 4)
        self.assertEqual(spec.num_parameters(), 16 + 7)

    def test_equality(self):
        a = NetworkSpecification(2, use_input_bias=False)
        a.add_linear_layer(Activation.RELU, 2)
        b = NetworkSpecification(2, use_input_bias=False)
        b.add_linear_layer('relu', 2)
        self.assertEqual(a, b)

        b.add_linear_layer(Activation.IDENTITY, 1)
        self.assertNotEqual(a, b)

    def test_unknown_activation(self):
        with self.assertRaises(ValueError):
            NetworkSpecification(1).add_linear_layer('swish', 1)


class TestTinyNeuralNetwork(unittest.TestCase):

    def test_default_construction_is_zero(self):
        net = TinyNeuralNetwork(2)
        net.add_linear_layer(Activation.IDENTITY, 1)
        self.assertEqual(net.input_dim(), 2)
        self.assertEqual(net.output_dim(), 1)
        self.assertEqual(net.compute([1.5, -2.0]), [0.0])
        self.assertTrue(all(p == 0.0 for p in net.get_parameters()))

    def test_no_layers(self):
        net = TinyNeuralNetwork(0)
        self.assertEqual(net.num_layers(), 0)
        self.assertEqual(net.output_dim(), 0)
        self.assertEqual(net.compute([]), [])

    def test_compute_rejects_wrong_input_size(self):
        net = TinyNeuralNetwork(2)
        net.add_linear_layer(Activation.IDENTITY, 1)
        with self.assertRaises(ValueError):
            net.compute([1.0])

    def test_set_parameters(self):
        spec = NetworkSpecification(2, use_input_bias=True)
        spec.add_linear_layer(Activation.IDENTITY, 1)
        net = TinyNeuralNetwork(spec)

        # input bias (2), weights (1x2), output bias (1)
        net.set_parameters([1.0, 0.0, 2.0, 3.0, 0.5])
        self.assertEqual(net.get_parameters(), [1.0, 0.0, 2.0, 3.0, 0.5])
        # (1 + 1) * 2 + (1 + 0) * 3 + 0.5
        self.assertAlmostEqual(net.compute([1.0, 1.0])[0], 7.5)

        with self.assertRaises(ValueError):
            net.set_parameters([1.0])

    def test_activation_applied(self):
        spec = NetworkSpecification(1, use_input_bias=False)
        spec.add_linear_layer(Activation.RELU, 1)
        net = TinyNeuralNetwork(spec)
        net.set_parameters([1.0, 0.0])
        self.assertEqual(net.compute([-3.0]), [0.0])
        self.assertEqual(net.compute([3.0]), [3.0])

    def test_set_input_dim_keeps_weights(self):
        net = TinyNeuralNetwork(1, use_input_bias=False)
        net.add_linear_layer(Activation.IDENTITY, 1)
        net.set_parameters([2.0, 1.0])

        net.set_input_dim(2)
        self.assertEqual(net.input_dim(), 2)
        self.assertEqual(net.get_parameters(), [2.0, 0.0, 1.0])
        self.assertAlmostEqual(net.compute([3.0, 100.0])[0], 7.0)

    def test_initialize(self):
        torch.manual_seed(0)
        net = TinyNeuralNetwork(3)
        net.add_linear_layer(Activation.TANH, 4)
        net.add_linear_layer(Activation.IDENTITY, 1)

        net.initialize(Initialization.XAVIER)
        weights = net.layers[0].weight
        self.assertTrue(torch.any(weights != 0))
        self.assertTrue(torch.all(net.layers[0].bias == 0))
        self.assertTrue(torch.all(net.input_bias == 0))

        net.initialize('he')
        self.assertTrue(torch.any(net.layers[1].weight != 0))

    def test_equivalence_after_copy(self):
        torch.manual_seed(1)
        net = TinyNeuralNetwork(2)
        net.add_linear_layer(Activation.SIGMOID, 1)
        net.initialize()

        clone = copy.deepcopy(net)
        self.assertTrue(net.is_equivalent(clone))
        self.assertEqual(net.compute([0.3, 0.4]), clone.compute([0.3, 0.4]))

        clone.initialize()
        self.assertFalse(net.is_equivalent(clone))

    def test_forward_batch(self):
        net = TinyNeuralNetwork(2, use_input_bias=False)
        net.add_linear_layer(Activation.IDENTITY, 1)
        net.set_parameters([1.0, 1.0, 0.0])
        output = net(torch.tensor([[1.0, 2.0], [3.0, 4.0]], dtype=torch.float64))
        self.assertEqual(output.shape, (2, 1))


if __name__ == '__main__':
    unittest.main()
